"""
Bid Commitments - Pedersen commitments binding each bidder to a bid.

Each bidder publishes C = g^bid * h^salt mod p before the protocol runs.
The commitment:
1. Is bound into every bit proof challenge, so a proof cannot be moved
   to another bidder
2. Lets the winner prove, after the clearing price is revealed, that the
   price is the bid they committed to (by revealing the salt)

Hiding rests on the random salt; binding rests on nobody knowing log_g(h).
"""

from dataclasses import dataclass
from typing import Optional, Tuple

from sbrac.core.errors import PreconditionViolation
from sbrac.crypto.group import GroupElement, GroupParameters, Scalar
from sbrac.crypto.randomness import RandomSource, random_scalar
from sbrac.utils.logger import get_logger
from sbrac.utils.validation import validate_scalar

logger = get_logger("commitment")


@dataclass(frozen=True)
class BidCommitment:
    """A published Pedersen commitment C = g^bid * h^salt mod p."""
    value: GroupElement


def pedersen_commit(params: GroupParameters, value: int, randomness: int) -> GroupElement:
    """
    Compute g^value * h^randomness mod p.

    Raises:
        PreconditionViolation: if value or randomness is outside [0, q)
    """
    for name, scalar in (("value", value), ("randomness", randomness)):
        valid, err = validate_scalar(scalar, params.q, name)
        if not valid:
            raise PreconditionViolation(err)
    return params.commit(value, randomness)


def commit_bid(
    params: GroupParameters,
    bid: int,
    rng: Optional[RandomSource] = None,
) -> Tuple[BidCommitment, Scalar]:
    """
    Commit to a bid with a fresh salt.

    Returns:
        (BidCommitment, salt); the salt stays private until the bid is opened
    """
    salt = Scalar(random_scalar(params, rng))
    commitment = BidCommitment(pedersen_commit(params, bid, salt))
    return commitment, salt


def open_commitment(
    params: GroupParameters,
    commitment: BidCommitment,
    value: int,
    randomness: int,
) -> bool:
    """Check that commitment opens to (value, randomness)."""
    if not params.is_scalar(value) or not params.is_scalar(randomness):
        return False
    return params.commit(value, randomness) == commitment.value


def verify_winner_claim(
    params: GroupParameters,
    commitment: BidCommitment,
    clearing_price: int,
    salt: int,
) -> bool:
    """
    Check a claimed winner's opening against the clearing price.

    The claimant reveals the salt of their bid commitment; the claim holds
    only if the commitment opens to exactly the clearing price.
    """
    accepted = open_commitment(params, commitment, clearing_price, salt)
    if not accepted:
        logger.warning(f"Winner claim rejected for clearing price {clearing_price}")
    return accepted


__all__ = [
    "BidCommitment",
    "pedersen_commit",
    "commit_bid",
    "open_commitment",
    "verify_winner_claim",
]
