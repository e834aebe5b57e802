"""
Entropy helpers:
combine raw quantum bit streams and amplify/mix them with a cryptographic hash.
"""

from __future__ import annotations

import hashlib
from typing import List, Sequence


def bits_to_bytes(bits: List[int]) -> bytes:
    """
    Pack a list of bits [0,1,1,0,...] into bytes (8 bits per byte).
    If bits length is not a multiple of 8, pad with zeros at the end.
    """
    if not bits:
        return b""

    pad_len = (8 - (len(bits) % 8)) % 8
    bits_padded = bits + [0] * pad_len

    byte_values = []
    for i in range(0, len(bits_padded), 8):
        byte = 0
        for bit in bits_padded[i : i + 8]:
            byte = (byte << 1) | bit
        byte_values.append(byte)

    return bytes(byte_values)


def xor_streams(streams: Sequence[List[int]]) -> List[int]:
    """
    XOR-combine several equally long bit streams into one.
    """
    if not streams:
        raise ValueError("at least one bit stream is required")

    combined = list(streams[0])
    for bits in streams[1:]:
        if len(bits) != len(combined):
            raise ValueError(
                "Quantum streams produced different bit-lengths; "
                "this should not happen."
            )
        combined = [(b ^ c) for b, c in zip(bits, combined)]
    return combined


def amplify_entropy(bits: List[int], rounds: int = 1, counter: int = 0) -> bytes:
    """
    Apply SHA-256 hashing `rounds` times to mix the raw bits.

    `counter` is hashed in with the first round so that two equal raw
    samples still give different output blocks.
    """
    data = bits_to_bytes(bits)
    if rounds <= 0:
        return data

    data = hashlib.sha256(counter.to_bytes(8, "big") + data).digest()
    for _ in range(rounds - 1):
        data = hashlib.sha256(data).digest()

    return data
