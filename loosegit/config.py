"""Git-like configuration: read/write .git/config (INI format)."""

from __future__ import annotations

import configparser
import io
from pathlib import Path
from typing import TYPE_CHECKING, Optional

from .constants import CONFIG_FILENAME, DEFAULT_COMPRESSION
from .errors import InvalidConfigKeyError, InvalidConfigValueError
from .util import read_text_safe, write_text_atomic

if TYPE_CHECKING:
    from .repo import Repository


def _config_path(repo: "Repository") -> Path:
    return repo.git_dir / CONFIG_FILENAME


def _parse_key(key: str) -> tuple[str, str]:
    """Return (section, option). Raises InvalidConfigKeyError if key invalid."""
    parts = key.split(".")
    if len(parts) != 2 or not parts[0].strip() or not parts[1].strip():
        raise InvalidConfigKeyError(f"invalid config key: {key!r} (expected section.option)")
    return parts[0].strip(), parts[1].strip()


def read_config(repo: "Repository") -> configparser.ConfigParser:
    """Read .git/config. Return empty parser if file missing or unparseable."""
    repo.require_repo()
    cfg = configparser.ConfigParser()
    content = read_text_safe(_config_path(repo))
    if content:
        try:
            cfg.read_string(content)
        except configparser.Error:
            return configparser.ConfigParser()
    return cfg


def write_config(repo: "Repository", cfg: configparser.ConfigParser) -> None:
    """Write config to .git/config atomically."""
    repo.require_repo()
    buf = io.StringIO()
    cfg.write(buf)
    write_text_atomic(_config_path(repo), buf.getvalue())


def get_value(repo: "Repository", key: str) -> Optional[str]:
    """Get config value for key (section.option). Return None if missing."""
    section, option = _parse_key(key)
    cfg = read_config(repo)
    if cfg.has_section(section) and cfg.has_option(section, option):
        return cfg.get(section, option)
    return None


def set_value(repo: "Repository", key: str, value: str) -> None:
    """Set config value. Creates section if needed."""
    section, option = _parse_key(key)
    cfg = read_config(repo)
    if not cfg.has_section(section):
        cfg.add_section(section)
    cfg.set(section, option, value)
    write_config(repo, cfg)


def unset_value(repo: "Repository", key: str) -> bool:
    """Remove config option. Remove section if empty. Return True if something removed."""
    section, option = _parse_key(key)
    cfg = read_config(repo)
    if not cfg.has_section(section) or not cfg.has_option(section, option):
        return False
    cfg.remove_option(section, option)
    if not cfg.options(section):
        cfg.remove_section(section)
    write_config(repo, cfg)
    return True


def list_values(repo: "Repository") -> list[tuple[str, str]]:
    """Return [(key, value), ...] sorted by key (section.option)."""
    cfg = read_config(repo)
    result: list[tuple[str, str]] = []
    for section in sorted(cfg.sections()):
        for option in sorted(cfg.options(section)):
            result.append((f"{section}.{option}", cfg.get(section, option)))
    return result


def loose_compression_level(repo: "Repository") -> int:
    """zlib level for loose objects: core.loosecompression, then core.compression, else -1."""
    for key in ("core.loosecompression", "core.compression"):
        raw = get_value(repo, key)
        if raw is None:
            continue
        try:
            level = int(raw.strip())
        except ValueError:
            raise InvalidConfigValueError(f"{key} must be an integer, got {raw!r}") from None
        if not -1 <= level <= 9:
            raise InvalidConfigValueError(f"{key} must be between -1 and 9, got {level}")
        return level
    return DEFAULT_COMPRESSION
