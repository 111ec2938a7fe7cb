"""
Prime-order group arithmetic for SBRAC.

All commitments, published terms and proofs live in the subgroup of
order q inside Z_p* (p prime, q | p - 1). Two generators g and h of that
subgroup are fixed; nobody may know log_g(h).

This module provides:
- GroupParameters: immutable (p, q, g, h), passed explicitly everywhere
- Exact modular helpers (add, sub, mul, inv, div, pow)
- Named presets: RFC 3526 group 14 (default) and a tiny test group
- Hash-to-subgroup derivation of independent generators

Exponents (Scalar, values in Z_q) and group values (GroupElement, values
in Z_p*) are distinct NewTypes so that a type checker catches one being
passed where the other is expected.
"""

from dataclasses import dataclass
from typing import Dict, NewType

from Crypto.Util.number import GCD, inverse, isPrime

from sbrac.crypto import hash_to_int, int_to_fixed_bytes
from sbrac.core.errors import InvalidGroupParameters, ModularInverseError


Scalar = NewType("Scalar", int)
GroupElement = NewType("GroupElement", int)


# =============================================================================
# Modular Arithmetic
# =============================================================================


def _check_modulus(mod: int) -> None:
    if mod <= 0:
        raise ValueError(f"Modulus must be positive, got {mod}")


def mod_add(a: int, b: int, mod: int) -> int:
    """(a + b) mod m"""
    _check_modulus(mod)
    return (a + b) % mod


def mod_sub(a: int, b: int, mod: int) -> int:
    """(a - b) mod m, always in [0, m)"""
    _check_modulus(mod)
    return (a - b) % mod


def mod_mul(a: int, b: int, mod: int) -> int:
    """(a * b) mod m"""
    _check_modulus(mod)
    return (a * b) % mod


def mod_inv(a: int, mod: int) -> int:
    """
    Multiplicative inverse of a modulo m.

    Raises:
        ModularInverseError: if a is zero or shares a factor with m
    """
    _check_modulus(mod)
    a %= mod
    if a == 0 or GCD(a, mod) != 1:
        raise ModularInverseError(f"{a} has no inverse modulo {mod}")
    return inverse(a, mod)


def mod_div(a: int, b: int, mod: int) -> int:
    """a * b^-1 mod m"""
    return mod_mul(a, mod_inv(b, mod), mod)


def mod_pow(base: int, exp: int, mod: int) -> int:
    """
    base^exp mod m.

    Negative exponents are taken through the inverse of base.
    """
    _check_modulus(mod)
    if exp < 0:
        return pow(mod_inv(base, mod), -exp, mod)
    return pow(base, exp, mod)


# =============================================================================
# Group Parameters
# =============================================================================


@dataclass(frozen=True)
class GroupParameters:
    """
    Public parameters of the order-q subgroup of Z_p*.

    Attributes:
        p: Prime modulus
        q: Prime subgroup order, q | p - 1
        g: Generator of the order-q subgroup
        h: Second generator with unknown discrete log to base g
        name: Human-readable label (not part of any hash)

    Construction runs validate(), so a GroupParameters instance always
    satisfies the group invariants.
    """
    p: int
    q: int
    g: int
    h: int
    name: str = "custom"

    def __post_init__(self):
        self.validate()

    @property
    def identity(self) -> GroupElement:
        return GroupElement(1)

    @property
    def element_size(self) -> int:
        """Byte length of p; every element is hashed at this width."""
        return (self.p.bit_length() + 7) // 8

    def is_element(self, value: int) -> bool:
        """Whether value is a residue in [1, p)."""
        return isinstance(value, int) and 0 < value < self.p

    def is_scalar(self, value: int) -> bool:
        """Whether value is an exponent in [0, q)."""
        return isinstance(value, int) and 0 <= value < self.q

    def encode(self, value: int) -> bytes:
        """Fixed-width encoding of an element (or any value below p)."""
        return int_to_fixed_bytes(value, self.element_size)

    def exp(self, base: int, exponent: int) -> GroupElement:
        """base^exponent mod p"""
        return GroupElement(mod_pow(base, exponent, self.p))

    def mul(self, a: int, b: int) -> GroupElement:
        """a * b mod p"""
        return GroupElement(mod_mul(a, b, self.p))

    def div(self, a: int, b: int) -> GroupElement:
        """a / b mod p"""
        return GroupElement(mod_div(a, b, self.p))

    def commit(self, a: int, b: int) -> GroupElement:
        """g^a * h^b mod p"""
        return self.mul(pow(self.g, a, self.p), pow(self.h, b, self.p))

    def validate(self) -> None:
        """
        Check the group invariants.

        Raises:
            InvalidGroupParameters: on the first violated invariant
        """
        if not isPrime(self.p):
            raise InvalidGroupParameters(f"p={self.p} is not prime")
        if not isPrime(self.q):
            raise InvalidGroupParameters(f"q={self.q} is not prime")
        if (self.p - 1) % self.q != 0:
            raise InvalidGroupParameters("q does not divide p - 1")
        for label, gen in (("g", self.g), ("h", self.h)):
            if not 1 < gen < self.p:
                raise InvalidGroupParameters(f"{label} must lie in (1, p)")
            if pow(gen, self.q, self.p) != 1:
                raise InvalidGroupParameters(f"{label} does not have order q")
        if self.g == self.h:
            raise InvalidGroupParameters("g and h must differ")

    def __repr__(self) -> str:
        return f"GroupParameters(name={self.name!r}, p_bits={self.p.bit_length()}, q_bits={self.q.bit_length()})"


# =============================================================================
# Generator Derivation
# =============================================================================

# Domain separator for hash-to-subgroup
DOMAIN_GENERATOR = b"sbrac/generator/v1"


def derive_generator(p: int, q: int, seed: bytes, avoid: int = 1) -> int:
    """
    Derive a generator of the order-q subgroup from a public seed.

    The seed is expanded with SHA-256 to more than the width of p, reduced
    mod p and raised to the cofactor (p - 1) / q. Nobody learns the discrete
    log of the result to any other base.

    Args:
        p: Prime modulus
        q: Prime subgroup order
        seed: Public seed bytes
        avoid: A value the result must differ from (usually g)

    Returns:
        Element of order q
    """
    cofactor = (p - 1) // q
    width = (p.bit_length() + 7) // 8 + 16
    counter = 0
    while True:
        stream = b""
        block = 0
        while len(stream) < width:
            stream += hash_to_int(
                DOMAIN_GENERATOR,
                seed,
                int_to_fixed_bytes(counter, 4),
                int_to_fixed_bytes(block, 4),
            ).to_bytes(32, "big")
            block += 1
        candidate = pow(int.from_bytes(stream[:width], "big") % p, cofactor, p)
        if candidate not in (0, 1, avoid):
            return candidate
        counter += 1


# =============================================================================
# Presets
# =============================================================================

# RFC 3526 MODP group 14 (2048-bit safe prime)
_MODP_2048_P = int(
    "FFFFFFFFFFFFFFFFC90FDAA22168C234C4C6628B80DC1CD1"
    "29024E088A67CC74020BBEA63B139B22514A08798E3404DD"
    "EF9519B3CD3A431B302B0A6DF25F14374FE1356D6D51C245"
    "E485B576625E7EC6F44C42E9A637ED6B0BFF5CB6F406B7ED"
    "EE386BFB5A899FA5AE9F24117C4B1FE649286651ECE45B3D"
    "C2007CB8A163BF0598DA48361C55D39A69163FA8FD24CF5F"
    "83655D23DCA3AD961C62F356208552BB9ED529077096966D"
    "670C354E4ABC9804F1746C08CA18217C32905E462E36CE3B"
    "E39E772C180E86039B2783A2EC07A28FB5C55DF06F4C52C9"
    "DE2BCBF6955817183995497CEA956AE515D2261898FA0510"
    "15728E5A8AACAA68FFFFFFFFFFFFFFFF",
    16,
)
_MODP_2048_Q = (_MODP_2048_P - 1) // 2
_MODP_2048_G = 4  # 2^2, a quadratic residue, so it has order q

MODP_2048 = GroupParameters(
    p=_MODP_2048_P,
    q=_MODP_2048_Q,
    g=_MODP_2048_G,
    h=derive_generator(_MODP_2048_P, _MODP_2048_Q, b"sbrac/modp2048/h", avoid=_MODP_2048_G),
    name="modp2048",
)

# Tiny group for tests and demos only: q has 10 bits
TOY_GROUP = GroupParameters(p=2039, q=1019, g=9, h=461, name="toy")

GROUP_PRESETS: Dict[str, GroupParameters] = {
    MODP_2048.name: MODP_2048,
    TOY_GROUP.name: TOY_GROUP,
}


def get_group(name: str) -> GroupParameters:
    """
    Look up a named group preset.

    Raises:
        KeyError: if no preset has that name
    """
    try:
        return GROUP_PRESETS[name]
    except KeyError:
        raise KeyError(f"Unknown group {name!r}, expected one of {sorted(GROUP_PRESETS)}") from None
