"""
Bit Proofs - Non-interactive OR-proofs that a published value encodes a bit.

A prover publishes e and shows, without revealing which, that either

    e = g^t * h^s          (bit 0)
    e = g^t * h^s * g      (bit 1)

for secrets t, s it knows. The proof is a two-branch Sigma protocol made
non-interactive with Fiat-Shamir:

1. The true branch commits honestly: a = g^alpha * h^beta
2. The false branch picks its challenge and responses first and solves
   for the commitment that makes its equation hold
3. The total challenge c = H(g, h, C, e, a1, a2, position) mod q
4. The true branch takes challenge c - c_false and answers honestly

Verification equations (slot layout is fixed, whichever branch was real):

    c1 + c2            = H(g, h, C, e, a1, a2, position)   (mod q)
    g^z1 * h^z2        = a1 * e^c1                         (mod p)
    g^w  * h^v         = a2 * (e / g)^c2                   (mod p)

The bidder commitment C and the bit position are hashed into the
challenge, so a proof cannot be replayed for another bidder or position.
"""

from dataclasses import dataclass, fields
from typing import TYPE_CHECKING, Dict, Optional, Tuple, Union

from sbrac.core.errors import InvalidBitError, PreconditionViolation
from sbrac.crypto import hash_to_int, hex_to_int, int_to_fixed_bytes, int_to_hex
from sbrac.crypto.group import GroupElement, GroupParameters, Scalar, mod_add, mod_mul, mod_sub
from sbrac.crypto.randomness import RandomSource, default_rng
from sbrac.utils.logger import get_logger

if TYPE_CHECKING:
    from sbrac.core.auction.commitment import BidCommitment

logger = get_logger("bit_proof")


# =============================================================================
# Constants
# =============================================================================

# Domain separator for the Fiat-Shamir hash
DOMAIN_BIT_PROOF = b"sbrac/bit-proof/v1"

# Width of the position field in the hash input
POSITION_BYTES = 8
MAX_POSITION = (1 << (8 * POSITION_BYTES)) - 1


# =============================================================================
# Proof Record
# =============================================================================


@dataclass(frozen=True)
class BitProof:
    """
    Proof that a published value encodes 0 or 1.

    (c1, z1, z2, a1) answer the bit-0 equation and (c2, w, v, a2) the
    bit-1 equation. All but a1, a2 are scalars mod q; a1, a2 are mod p.
    """
    c1: int
    c2: int
    z1: int
    z2: int
    w: int
    v: int
    a1: int
    a2: int

    @property
    def scalars(self) -> Tuple[int, ...]:
        return (self.c1, self.c2, self.z1, self.z2, self.w, self.v)

    def to_dict(self) -> Dict[str, str]:
        """Serialize to hex strings."""
        return {f.name: int_to_hex(getattr(self, f.name)) for f in fields(self)}

    @classmethod
    def from_dict(cls, data: Dict[str, str]) -> "BitProof":
        """Deserialize from hex strings (or ints)."""
        values = {}
        for f in fields(cls):
            raw = data[f.name]
            values[f.name] = hex_to_int(raw) if isinstance(raw, str) else int(raw)
        return cls(**values)


# =============================================================================
# Fiat-Shamir Challenge
# =============================================================================


def compute_challenge(
    params: GroupParameters,
    commitment: int,
    value: int,
    a1: int,
    a2: int,
    position: int,
) -> Scalar:
    """
    Compute c = H(g, h, C, e, a1, a2, position) mod q.

    Every group value is encoded at the width of p and the position as
    8 big-endian bytes, so the layout is identical for prover and verifier.
    """
    digest = hash_to_int(
        DOMAIN_BIT_PROOF,
        params.encode(params.g),
        params.encode(params.h),
        params.encode(commitment),
        params.encode(value),
        params.encode(a1),
        params.encode(a2),
        int_to_fixed_bytes(position, POSITION_BYTES),
    )
    return Scalar(digest % params.q)


# =============================================================================
# Bit Commitment
# =============================================================================


def commit_bit(
    params: GroupParameters,
    bit: int,
    rng: Optional[RandomSource] = None,
) -> Tuple[GroupElement, Scalar, Scalar]:
    """
    Build the published value for a bit: e = g^t * h^s * g^bit.

    Returns:
        (e, t, s)

    Raises:
        InvalidBitError: if bit is not 0 or 1
    """
    _check_bit(bit)
    rng = default_rng(rng)
    t = Scalar(rng.randbelow(params.q))
    s = Scalar(rng.randbelow(params.q))
    value = params.commit(t, s)
    if bit == 1:
        value = params.mul(value, params.g)
    return value, t, s


def _check_bit(bit: int) -> None:
    if isinstance(bit, bool) or bit not in (0, 1):
        raise InvalidBitError(f"bit value must be 0 or 1, got {bit!r}")


def _commitment_value(commitment: Union["BidCommitment", int]) -> int:
    return getattr(commitment, "value", commitment)


# =============================================================================
# Proof Generation
# =============================================================================


def generate_bit_proof(
    params: GroupParameters,
    commitment: Union["BidCommitment", int],
    value: int,
    t: int,
    s: int,
    bit: int,
    position: int,
    rng: Optional[RandomSource] = None,
) -> BitProof:
    """
    Prove that value = g^t * h^s * g^bit without revealing bit.

    Args:
        params: Group parameters
        commitment: The prover's bid commitment (bound into the challenge)
        value: Published value e
        t: Secret exponent of g
        s: Secret exponent of h
        bit: 0 or 1
        position: Bit position (bound into the challenge)
        rng: Randomness for blinding; defaults to SecureRandom

    Returns:
        BitProof

    Raises:
        InvalidBitError: if bit is not 0 or 1
        PreconditionViolation: if position does not fit the hash encoding
    """
    _check_bit(bit)
    if not 0 <= position <= MAX_POSITION:
        raise PreconditionViolation(f"position must be in [0, {MAX_POSITION}], got {position}")

    rng = default_rng(rng)
    q = params.q
    c_value = _commitment_value(commitment)

    alpha = rng.randbelow(q)
    beta = rng.randbelow(q)
    fake_r1 = rng.randbelow(q)
    fake_r2 = rng.randbelow(q)
    fake_c = rng.randbelow(q)

    # Value each branch proves knowledge of a (g, h) representation for
    bit0_base = value
    bit1_base = params.div(value, params.g)

    real_a = params.commit(alpha, beta)

    if bit == 0:
        # Simulate the bit-1 branch: a2 = g^w h^v / (e/g)^c2
        a1 = real_a
        a2 = params.div(params.commit(fake_r1, fake_r2), params.exp(bit1_base, fake_c))
    else:
        # Simulate the bit-0 branch: a1 = g^z1 h^z2 / e^c1
        a1 = params.div(params.commit(fake_r1, fake_r2), params.exp(bit0_base, fake_c))
        a2 = real_a

    c = compute_challenge(params, c_value, value, a1, a2, position)
    real_c = mod_sub(c, fake_c, q)
    real_r1 = mod_add(alpha, mod_mul(real_c, t, q), q)
    real_r2 = mod_add(beta, mod_mul(real_c, s, q), q)

    if bit == 0:
        proof = BitProof(
            c1=real_c, c2=fake_c,
            z1=real_r1, z2=real_r2,
            w=fake_r1, v=fake_r2,
            a1=a1, a2=a2,
        )
    else:
        proof = BitProof(
            c1=fake_c, c2=real_c,
            z1=fake_r1, z2=fake_r2,
            w=real_r1, v=real_r2,
            a1=a1, a2=a2,
        )

    logger.debug(f"Generated bit proof for position {position}")
    return proof


# =============================================================================
# Proof Verification
# =============================================================================


def verify_bit_proof(
    params: GroupParameters,
    commitment: Union["BidCommitment", int],
    value: int,
    proof: BitProof,
    position: int,
) -> bool:
    """
    Verify a bit proof.

    Args:
        params: Group parameters
        commitment: The prover's bid commitment
        value: Published value e
        proof: Proof to check
        position: Bit position the proof must be bound to

    Returns:
        True if the proof is valid, False otherwise
    """
    q = params.q
    c_value = _commitment_value(commitment)

    if not 0 <= position <= MAX_POSITION:
        return False
    if not all(params.is_scalar(x) for x in proof.scalars):
        return False
    if not all(params.is_element(x) for x in (value, proof.a1, proof.a2, c_value)):
        return False

    # Step 1: challenge split must match the transcript hash
    expected = compute_challenge(params, c_value, value, proof.a1, proof.a2, position)
    if mod_add(proof.c1, proof.c2, q) != expected:
        logger.debug(f"Bit proof rejected at position {position}: challenge mismatch")
        return False

    # Step 2: bit-0 equation, g^z1 h^z2 = a1 * e^c1
    left1 = params.commit(proof.z1, proof.z2)
    right1 = params.mul(proof.a1, params.exp(value, proof.c1))
    if left1 != right1:
        logger.debug(f"Bit proof rejected at position {position}: bit-0 equation")
        return False

    # Step 3: bit-1 equation, g^w h^v = a2 * (e/g)^c2
    left2 = params.commit(proof.w, proof.v)
    right2 = params.mul(proof.a2, params.exp(params.div(value, params.g), proof.c2))
    if left2 != right2:
        logger.debug(f"Bit proof rejected at position {position}: bit-1 equation")
        return False

    return True


__all__ = [
    "BitProof",
    "compute_challenge",
    "commit_bit",
    "generate_bit_proof",
    "verify_bit_proof",
    "DOMAIN_BIT_PROOF",
]
