"""
Participants - Per-bidder secret and public material.

Each bidder i holds, for every bit position j of its bid:
- a secret pair (x_ij, s_ij), uniform in [0, q)
- a public pair (X_ij, S_ij) = (g^x_ij, g^s_ij) mod p

Only the public pairs and the bid commitment are broadcast. During the
protocol each bidder derives T_i[j] from everyone's X values and
publishes T_i[j]^x_ij or T_i[j]^s_ij depending on its bit; the secret
exponents and the bid bits themselves never leave the participant.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

from sbrac.core.auction.commitment import BidCommitment, commit_bid
from sbrac.core.errors import PreconditionViolation
from sbrac.core.prover.bit_proof import BitProof, commit_bit, generate_bit_proof
from sbrac.crypto.group import GroupElement, GroupParameters, Scalar
from sbrac.crypto.randomness import RandomSource, default_rng
from sbrac.utils.logger import get_logger
from sbrac.utils.validation import (
    validate_bid,
    validate_bit_length,
    validate_matrix_shape,
    validate_participant_index,
)

logger = get_logger("participant")


# =============================================================================
# Bit Helpers
# =============================================================================


def int_to_bits(value: int, bit_length: int) -> Tuple[int, ...]:
    """Big-endian expansion of value into exactly bit_length bits."""
    return tuple((value >> (bit_length - 1 - j)) & 1 for j in range(bit_length))


def bits_to_int(bits: Sequence[int]) -> int:
    """Inverse of int_to_bits (most significant bit first)."""
    result = 0
    for bit in bits:
        result = (result << 1) | bit
    return result


# =============================================================================
# Data Structures
# =============================================================================


@dataclass(frozen=True)
class SecretPair:
    """Secret exponents (x_ij, s_ij) for one bit position."""
    x: Scalar
    s: Scalar

    def __repr__(self) -> str:
        return "SecretPair(<hidden>)"


@dataclass(frozen=True)
class PublicPair:
    """Broadcast values (X_ij, S_ij) = (g^x_ij, g^s_ij)."""
    x: GroupElement
    s: GroupElement


@dataclass(frozen=True)
class BitDisclosure:
    """A published bit value with its proof of well-formedness."""
    position: int
    value: GroupElement
    proof: BitProof


@dataclass
class ParticipantState:
    """
    One bidder's protocol state.

    Attributes:
        participant_id: Index in [0, n_participants)
        bid: The secret bid
        bit_length: Agreed bit length L
        n_participants: Total number of bidders n
        bid_bits: Big-endian L-bit expansion of bid
        commitment: Public Pedersen commitment to bid
        salt: Commitment randomness, private until a winner claim
        secret_pairs: (x_ij, s_ij) per position
        public_pairs: (X_ij, S_ij) per position
        is_lost: Set once a round proves this bid exceeds the minimum
        t_values: T_i[j] per position, set by compute_t
    """
    participant_id: int
    bid: int = field(repr=False)
    bit_length: int
    n_participants: int
    bid_bits: Tuple[int, ...] = field(repr=False)
    commitment: BidCommitment
    salt: Scalar = field(repr=False)
    secret_pairs: List[SecretPair] = field(repr=False)
    public_pairs: List[PublicPair] = field(repr=False)
    is_lost: bool = False
    t_values: List[GroupElement] = field(default_factory=list, repr=False)

    @classmethod
    def create(
        cls,
        params: GroupParameters,
        bid: int,
        participant_id: int,
        bit_length: int,
        n_participants: int,
        rng: Optional[RandomSource] = None,
    ) -> "ParticipantState":
        """
        Generate a bidder's secrets, public pairs and bid commitment.

        Args:
            params: Group parameters
            bid: Secret bid, 0 <= bid < 2^bit_length
            participant_id: This bidder's index
            bit_length: Agreed bit length L
            n_participants: Total number of bidders
            rng: Randomness source; defaults to SecureRandom

        Raises:
            PreconditionViolation: on out-of-range inputs
            RandomSourceError: if secure randomness is unavailable
        """
        for valid, err in (
            validate_bit_length(bit_length),
            validate_participant_index(participant_id, n_participants),
        ):
            if not valid:
                raise PreconditionViolation(err)
        valid, err = validate_bid(bid, bit_length)
        if not valid:
            raise PreconditionViolation(err)
        if bid >= params.q:
            raise PreconditionViolation(f"bid {bid} does not fit the group order")

        rng = default_rng(rng)
        secret_pairs = []
        public_pairs = []
        for _ in range(bit_length):
            x = Scalar(rng.randbelow(params.q))
            s = Scalar(rng.randbelow(params.q))
            secret_pairs.append(SecretPair(x=x, s=s))
            public_pairs.append(PublicPair(x=params.exp(params.g, x), s=params.exp(params.g, s)))

        commitment, salt = commit_bid(params, bid, rng)

        return cls(
            participant_id=participant_id,
            bid=bid,
            bit_length=bit_length,
            n_participants=n_participants,
            bid_bits=int_to_bits(bid, bit_length),
            commitment=commitment,
            salt=salt,
            secret_pairs=secret_pairs,
            public_pairs=public_pairs,
        )

    # =========================================================================
    # Protocol Steps
    # =========================================================================

    @property
    def public_xs(self) -> List[GroupElement]:
        """X_ij for every position."""
        return [pair.x for pair in self.public_pairs]

    def compute_t(self, params: GroupParameters, public_xs: Sequence[Sequence[int]]) -> List[GroupElement]:
        """
        Compute T_i[j] = prod_{k<i} X[k][j] / prod_{k>i} X[k][j] mod p.

        Args:
            params: Group parameters
            public_xs: n x L matrix of every participant's X values

        Returns:
            T_i as a list over positions (also stored on self)
        """
        valid, err = validate_matrix_shape(public_xs, self.n_participants, self.bit_length, "public_xs")
        if not valid:
            raise PreconditionViolation(err)

        i = self.participant_id
        t_values = []
        for j in range(self.bit_length):
            before = params.identity
            for k in range(i):
                before = params.mul(before, public_xs[k][j])
            after = params.identity
            for k in range(i + 1, self.n_participants):
                after = params.mul(after, public_xs[k][j])
            t_values.append(params.div(before, after))

        self.t_values = t_values
        return t_values

    def published_term(self, params: GroupParameters, position: int, is_lost: bool) -> GroupElement:
        """
        The value this bidder contributes to round `position`.

        T^s when the bit is 0 and the bidder is still active, T^x otherwise.
        `is_lost` is the round-start snapshot, not the live flag.
        """
        if not self.t_values:
            raise PreconditionViolation(f"participant {self.participant_id} has no T values yet")

        pair = self.secret_pairs[position]
        base = self.t_values[position]
        if self.bid_bits[position] == 0 and not is_lost:
            return params.exp(base, pair.s)
        return params.exp(base, pair.x)

    def eliminate(self) -> None:
        """Mark this bidder as lost; never reversed within a run."""
        self.is_lost = True

    # =========================================================================
    # Bit Disclosure
    # =========================================================================

    def disclose_bits(
        self,
        params: GroupParameters,
        rng: Optional[RandomSource] = None,
    ) -> List[BitDisclosure]:
        """
        Publish a committed value and a bit proof for every bid bit.

        Each value e_j = g^t * h^s * g^bit uses fresh t, s; proofs are bound
        to this bidder's commitment and to j.
        """
        rng = default_rng(rng)
        disclosures = []
        for j, bit in enumerate(self.bid_bits):
            value, t, s = commit_bit(params, bit, rng)
            proof = generate_bit_proof(params, self.commitment, value, t, s, bit, j, rng)
            disclosures.append(BitDisclosure(position=j, value=value, proof=proof))

        logger.debug(f"Participant {self.participant_id} disclosed {len(disclosures)} bit proofs")
        return disclosures


# =============================================================================
# Public Board
# =============================================================================


@dataclass(frozen=True)
class PublicBoard:
    """
    Everything bidders broadcast before the rounds start.

    Shared read-only by all participants and the engine.
    """
    commitments: Tuple[BidCommitment, ...]
    public_xs: Tuple[Tuple[GroupElement, ...], ...]

    @classmethod
    def from_participants(cls, participants: Sequence[ParticipantState]) -> "PublicBoard":
        return cls(
            commitments=tuple(p.commitment for p in participants),
            public_xs=tuple(tuple(pair.x for pair in p.public_pairs) for p in participants),
        )

    @property
    def n_participants(self) -> int:
        return len(self.commitments)


__all__ = [
    "ParticipantState",
    "PublicBoard",
    "SecretPair",
    "PublicPair",
    "BitDisclosure",
    "int_to_bits",
    "bits_to_int",
]
