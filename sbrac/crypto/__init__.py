"""
Cryptographic primitives for SBRAC.

This module provides:
- Hashing (SHA-256) for Fiat-Shamir challenges and generator derivation
- Canonical fixed-width integer encoding
- The prime-order group used by every protocol component
- Explicit randomness sources

Design Notes:
-------------
All protocol values live in the order-q subgroup of Z_p*. Exponents
(Scalar) and group values (GroupElement) are plain Python ints at runtime
but distinct types for the type checker.

Hash inputs are always encoded at a fixed width (the byte length of p),
so prover and verifier hash byte-identical transcripts.
"""

import hashlib


# =============================================================================
# Hashing
# =============================================================================


def hash_to_int(*parts: bytes) -> int:
    """Hash the concatenation of parts and read the digest as a big-endian int."""
    h = hashlib.sha256()
    for part in parts:
        h.update(part)
    return int.from_bytes(h.digest(), "big")


# =============================================================================
# Encoding
# =============================================================================


def int_to_fixed_bytes(value: int, length: int) -> bytes:
    """
    Encode a non-negative integer as exactly `length` big-endian bytes.
    
    Raises:
        ValueError: if value is negative or does not fit
    """
    if value < 0:
        raise ValueError(f"Cannot encode negative integer {value}")
    return value.to_bytes(length, byteorder="big")


def int_to_hex(value: int) -> str:
    """Convert a non-negative integer to a 0x-prefixed hex string."""
    return hex(value)


def hex_to_int(hex_str: str) -> int:
    """Convert hex string (with or without 0x prefix) to an integer."""
    if hex_str.startswith("0x") or hex_str.startswith("0X"):
        hex_str = hex_str[2:]
    return int(hex_str, 16)


# =============================================================================
# Group and Randomness
# =============================================================================

from sbrac.crypto.group import (
    GroupParameters,
    GroupElement,
    Scalar,
    MODP_2048,
    TOY_GROUP,
    GROUP_PRESETS,
    get_group,
    derive_generator,
    mod_add,
    mod_sub,
    mod_mul,
    mod_inv,
    mod_div,
    mod_pow,
)
from sbrac.crypto.randomness import (
    RandomSource,
    SecureRandom,
    DeterministicRandom,
    default_rng,
    random_scalar,
)
