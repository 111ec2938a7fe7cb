"""
SBRAC Auction Module.

This module provides the sealed-bid reverse auction:
- Pedersen bid commitments and winner claims
- Participant secrets, public pairs and the public board
- The clearing price engine (bitwise secure minimum)
"""

from sbrac.core.auction.commitment import (
    BidCommitment,
    pedersen_commit,
    commit_bid,
    open_commitment,
    verify_winner_claim,
)

from sbrac.core.auction.participant import (
    ParticipantState,
    PublicBoard,
    SecretPair,
    PublicPair,
    BitDisclosure,
    int_to_bits,
    bits_to_int,
)

from sbrac.core.auction.engine import (
    ClearingPriceEngine,
    RoundRecord,
    AuctionResult,
    decide_bit,
    run,
)

__all__ = [
    # Commitments
    "BidCommitment",
    "pedersen_commit",
    "commit_bid",
    "open_commitment",
    "verify_winner_claim",
    # Participants
    "ParticipantState",
    "PublicBoard",
    "SecretPair",
    "PublicPair",
    "BitDisclosure",
    "int_to_bits",
    "bits_to_int",
    # Engine
    "ClearingPriceEngine",
    "RoundRecord",
    "AuctionResult",
    "decide_bit",
    "run",
]
