"""
Clearing Price Engine - Secure minimum over bidders' bits, MSB first.

The engine runs one round per bit position j = 0 .. L-1:

1. Every bidder i publishes e_ij = T_i[j]^s_ij if its bit is 0 and it is
   still active, T_i[j]^x_ij otherwise.
2. The round aggregate is E_j = prod_i e_ij mod p.
3. Since T_i[j] = g^(sum_{k<i} x_kj - sum_{k>i} x_kj), the x-terms cancel
   pairwise: if every bidder used x, E_j = 1. So
       E_j == 1  ->  clearing bit 1 (no active bidder has a 0 here)
       E_j != 1  ->  clearing bit 0 (some active bidder has a 0 here)
4. On a 0 bit every active bidder whose bit is 1 is eliminated.

Rounds are strictly sequential: round j+1 reads the elimination state
produced by round j. Within a round every term is computed from the
round-start snapshot of is_lost and eliminations are applied together
once the decision is made.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

from sbrac.core.auction.participant import ParticipantState, PublicBoard, bits_to_int
from sbrac.core.errors import PreconditionViolation, RoundOrderError
from sbrac.crypto.group import MODP_2048, GroupElement, GroupParameters
from sbrac.crypto.randomness import RandomSource, default_rng
from sbrac.utils.logger import get_logger
from sbrac.utils.validation import validate_bids

logger = get_logger("engine")


# =============================================================================
# Records
# =============================================================================


@dataclass(frozen=True)
class RoundRecord:
    """
    Outcome of one round.

    Attributes:
        position: Bit position j (0 = most significant)
        aggregate: E_j, the product of all published terms
        bit: Clearing price bit decided this round
        eliminated: Ids of bidders eliminated this round
    """
    position: int
    aggregate: GroupElement
    bit: int
    eliminated: Tuple[int, ...] = ()


@dataclass
class AuctionResult:
    """Outcome of a full protocol run."""
    clearing_price: int
    clearing_price_bits: Tuple[int, ...]
    rounds: List[RoundRecord] = field(default_factory=list)
    winners: Tuple[int, ...] = ()
    participants: List[ParticipantState] = field(default_factory=list, repr=False)
    board: Optional[PublicBoard] = field(default=None, repr=False)


def decide_bit(params: GroupParameters, aggregate: int) -> int:
    """Map a round aggregate to a clearing price bit (identity -> 1)."""
    return 1 if aggregate == params.identity else 0


# =============================================================================
# Engine
# =============================================================================


class ClearingPriceEngine:
    """
    Runs the bitwise secure-minimum protocol.

    Usage:
        engine = ClearingPriceEngine(MODP_2048)
        price = engine.run([10, 11, 12], bit_length=4)   # 10

    Or round by round:
        engine.setup(bids, bit_length)
        for j in range(bit_length):
            record = engine.run_round(j)
        result = engine.result()
    """

    def __init__(self, params: GroupParameters, rng: Optional[RandomSource] = None):
        self.params = params
        self.rng = default_rng(rng)
        self._reset()

    def _reset(self) -> None:
        self.bit_length: int = 0
        self.participants: List[ParticipantState] = []
        self.board: Optional[PublicBoard] = None
        self.clearing_price_bits: List[int] = []
        self.rounds: List[RoundRecord] = []
        self._ready = False

    # =========================================================================
    # Setup
    # =========================================================================

    def setup(self, bids: Sequence[int], bit_length: int) -> PublicBoard:
        """
        Validate inputs, create participants and publish their values.

        Every precondition is checked here, before round 0.

        Args:
            bids: One bid per participant
            bit_length: Agreed bit length L

        Returns:
            The public board

        Raises:
            PreconditionViolation: on malformed bids or bit length
        """
        valid, err = validate_bids(bids, bit_length)
        if not valid:
            raise PreconditionViolation(err)
        if (1 << bit_length) > self.params.q:
            for i, bid in enumerate(bids):
                if bid >= self.params.q:
                    raise PreconditionViolation(f"bids[{i}]={bid} does not fit the group order")
            logger.warning(
                f"bit_length {bit_length} exceeds the {self.params.q.bit_length()}-bit group order "
                f"of {self.params.name}"
            )

        self._reset()
        self.bit_length = bit_length
        n = len(bids)

        self.participants = [
            ParticipantState.create(self.params, bid, i, bit_length, n, self.rng)
            for i, bid in enumerate(bids)
        ]
        self.board = PublicBoard.from_participants(self.participants)
        for participant in self.participants:
            participant.compute_t(self.params, self.board.public_xs)

        self._ready = True
        logger.debug(f"Auction set up: {n} participants, {bit_length} bits, group={self.params.name}")
        return self.board

    # =========================================================================
    # Rounds
    # =========================================================================

    @property
    def current_round(self) -> int:
        return len(self.rounds)

    @property
    def is_complete(self) -> bool:
        return self._ready and self.current_round == self.bit_length

    def run_round(self, position: int) -> RoundRecord:
        """
        Run the round for one bit position.

        Raises:
            RoundOrderError: if not set up, or position is not the next round
        """
        if not self._ready:
            raise RoundOrderError("setup() must be called before running rounds")
        if not self.participants:
            raise RoundOrderError("no participants, nothing to run")
        if self.is_complete:
            raise RoundOrderError(f"all {self.bit_length} rounds already ran")
        if position != self.current_round:
            raise RoundOrderError(f"expected round {self.current_round}, got {position}")

        snapshot = tuple(p.is_lost for p in self.participants)

        if len(self.participants) == 1:
            # T_0 is the empty ratio 1, so the aggregate carries no signal
            lone = self.participants[0]
            aggregate = lone.published_term(self.params, position, snapshot[0])
            bit = lone.bid_bits[position]
        else:
            aggregate = self.params.identity
            for participant, lost in zip(self.participants, snapshot):
                aggregate = self.params.mul(
                    aggregate, participant.published_term(self.params, position, lost)
                )
            bit = decide_bit(self.params, aggregate)

        eliminated: Tuple[int, ...] = ()
        if bit == 0:
            eliminated = tuple(
                p.participant_id
                for p, lost in zip(self.participants, snapshot)
                if not lost and p.bid_bits[position] == 1
            )
            for participant_id in eliminated:
                self.participants[participant_id].eliminate()

        record = RoundRecord(position=position, aggregate=aggregate, bit=bit, eliminated=eliminated)
        self.rounds.append(record)
        self.clearing_price_bits.append(bit)

        logger.debug(f"Round {position}: bit={bit}, eliminated={len(eliminated)}")
        return record

    def result(self) -> AuctionResult:
        """
        Collect the outcome once every round has run.

        Raises:
            RoundOrderError: if rounds are still pending
        """
        if not self._ready:
            raise RoundOrderError("setup() must be called before collecting a result")
        if self.participants and not self.is_complete:
            raise RoundOrderError(f"{self.bit_length - self.current_round} rounds still pending")

        bits = tuple(self.clearing_price_bits)
        return AuctionResult(
            clearing_price=bits_to_int(bits),
            clearing_price_bits=bits,
            rounds=list(self.rounds),
            winners=tuple(p.participant_id for p in self.participants if not p.is_lost),
            participants=list(self.participants),
            board=self.board,
        )

    # =========================================================================
    # Entry Points
    # =========================================================================

    def run_auction(self, bids: Sequence[int], bit_length: int) -> AuctionResult:
        """
        Run the full protocol.

        With no bids the clearing price is 0 and no round runs.
        """
        self.setup(bids, bit_length)

        if not self.participants:
            logger.info("Auction with no participants: clearing price 0")
            return self.result()

        for position in range(bit_length):
            self.run_round(position)

        result = self.result()
        logger.info(
            f"Auction complete: {len(bids)} participants, "
            f"clearing price {result.clearing_price}, winners {list(result.winners)}"
        )
        return result

    def run(self, bids: Sequence[int], bit_length: int) -> int:
        """Run the protocol and return only the clearing price."""
        return self.run_auction(bids, bit_length).clearing_price


def run(
    bids: Sequence[int],
    bit_length: int,
    params: Optional[GroupParameters] = None,
    rng: Optional[RandomSource] = None,
) -> int:
    """
    Compute the clearing price for bids.

    Args:
        bids: One bid per participant, each < 2^bit_length
        bit_length: Agreed bit length
        params: Group parameters; defaults to MODP_2048
        rng: Randomness source; defaults to SecureRandom
    """
    return ClearingPriceEngine(params or MODP_2048, rng).run(bids, bit_length)


__all__ = [
    "ClearingPriceEngine",
    "RoundRecord",
    "AuctionResult",
    "decide_bit",
    "run",
]
