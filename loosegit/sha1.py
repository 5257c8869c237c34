"""SHA-1 digest (FIPS 180-2) in pure Python. Used for object names and the index checksum."""

from __future__ import annotations

import struct

_MASK = 0xFFFFFFFF

_INITIAL_STATE = (0x67452301, 0xEFCDAB89, 0x98BADCFE, 0x10325476, 0xC3D2E1F0)

_BLOCK_LEN = 64
# Padded length before the 8-byte length suffix must be 56 mod 64 (448 mod 512 bits)
_LENGTH_OFFSET = 56


def _rotl(x: int, n: int) -> int:
    return ((x << n) | (x >> (32 - n))) & _MASK


def _pad(data: bytes) -> bytes:
    """Append 0x80, zero fill to 56 mod 64, then the bit length as a 64-bit big-endian int."""
    bit_len = (len(data) * 8) & 0xFFFFFFFFFFFFFFFF
    zeros = (_LENGTH_OFFSET - (len(data) + 1)) % _BLOCK_LEN
    return data + b"\x80" + b"\x00" * zeros + struct.pack(">Q", bit_len)


def _compress(state: list[int], block: bytes) -> None:
    """Run the 80-round compression function over one 64-byte block, updating state in place."""
    w = list(struct.unpack(">16I", block))
    for i in range(16, 80):
        w.append(_rotl(w[i - 3] ^ w[i - 8] ^ w[i - 14] ^ w[i - 16], 1))

    a, b, c, d, e = state
    for i in range(80):
        if i < 20:
            f = (b & c) | (~b & d)
            k = 0x5A827999
        elif i < 40:
            f = b ^ c ^ d
            k = 0x6ED9EBA1
        elif i < 60:
            f = (b & c) | (b & d) | (c & d)
            k = 0x8F1BBCDC
        else:
            f = b ^ c ^ d
            k = 0xCA62C1D6
        temp = (_rotl(a, 5) + (f & _MASK) + e + k + w[i]) & _MASK
        e = d
        d = c
        c = _rotl(b, 30)
        b = a
        a = temp

    state[0] = (state[0] + a) & _MASK
    state[1] = (state[1] + b) & _MASK
    state[2] = (state[2] + c) & _MASK
    state[3] = (state[3] + d) & _MASK
    state[4] = (state[4] + e) & _MASK


def digest(data: bytes) -> bytes:
    """Return the 20-byte SHA-1 digest of data."""
    state = list(_INITIAL_STATE)
    padded = _pad(bytes(data))
    for off in range(0, len(padded), _BLOCK_LEN):
        _compress(state, padded[off : off + _BLOCK_LEN])
    return struct.pack(">5I", *state)


def hexdigest(data: bytes) -> str:
    """Return the SHA-1 digest of data as 40 lowercase hex characters."""
    return digest(data).hex()
