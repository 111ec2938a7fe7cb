"""
Tests for participant state.

Tests cover:
1. Bit expansion helpers
2. Secret and public pair generation
3. T value computation and the telescoping identity
4. Published terms
5. Bit disclosures
"""

import pytest

from sbrac.crypto import DeterministicRandom, MODP_2048, TOY_GROUP
from sbrac.core.auction import (
    ParticipantState,
    PublicBoard,
    bits_to_int,
    int_to_bits,
    open_commitment,
)
from sbrac.core.errors import PreconditionViolation
from sbrac.core.prover import verify_bit_proof


@pytest.fixture
def rng():
    return DeterministicRandom(seed=99)


def make_participants(params, bids, bit_length, rng):
    participants = [
        ParticipantState.create(params, bid, i, bit_length, len(bids), rng)
        for i, bid in enumerate(bids)
    ]
    board = PublicBoard.from_participants(participants)
    for p in participants:
        p.compute_t(params, board.public_xs)
    return participants, board


class TestBitHelpers:

    def test_big_endian_expansion(self):
        assert int_to_bits(5, 4) == (0, 1, 0, 1)
        assert int_to_bits(0, 3) == (0, 0, 0)
        assert int_to_bits(15, 4) == (1, 1, 1, 1)

    def test_bits_to_int(self):
        assert bits_to_int((1, 0, 1, 0)) == 10
        assert bits_to_int(()) == 0

    def test_roundtrip(self):
        assert bits_to_int(int_to_bits(890, 10)) == 890


class TestParticipantCreation:

    def test_bits_and_lengths(self, rng):
        p = ParticipantState.create(TOY_GROUP, 10, 0, 4, 3, rng)
        assert p.bid_bits == (1, 0, 1, 0)
        assert len(p.secret_pairs) == 4
        assert len(p.public_pairs) == 4
        assert not p.is_lost
        assert p.t_values == []

    def test_public_pairs_use_g(self, rng):
        p = ParticipantState.create(TOY_GROUP, 3, 1, 4, 2, rng)
        for secret, public in zip(p.secret_pairs, p.public_pairs):
            assert 0 <= secret.x < TOY_GROUP.q
            assert 0 <= secret.s < TOY_GROUP.q
            assert public.x == pow(TOY_GROUP.g, secret.x, TOY_GROUP.p)
            assert public.s == pow(TOY_GROUP.g, secret.s, TOY_GROUP.p)

    def test_commitment_opens_to_bid(self, rng):
        p = ParticipantState.create(MODP_2048, 42, 0, 6, 1, rng)
        assert open_commitment(MODP_2048, p.commitment, 42, p.salt)

    def test_repr_hides_secrets(self, rng):
        p = ParticipantState.create(TOY_GROUP, 7, 0, 4, 1, rng)
        text = repr(p)
        assert "secret_pairs" not in text
        assert "salt" not in text
        assert "bid_bits" not in text

    def test_bid_too_large(self, rng):
        with pytest.raises(PreconditionViolation):
            ParticipantState.create(TOY_GROUP, 16, 0, 4, 1, rng)

    def test_negative_bid(self, rng):
        with pytest.raises(PreconditionViolation):
            ParticipantState.create(TOY_GROUP, -1, 0, 4, 1, rng)

    def test_id_out_of_range(self, rng):
        with pytest.raises(PreconditionViolation):
            ParticipantState.create(TOY_GROUP, 1, 3, 4, 3, rng)

    def test_bid_must_fit_group_order(self, rng):
        with pytest.raises(PreconditionViolation, match="group order"):
            ParticipantState.create(TOY_GROUP, 1020, 0, 11, 1, rng)


class TestTValues:

    def test_matches_definition(self, rng):
        params = TOY_GROUP
        participants, board = make_participants(params, [3, 5, 6], 3, rng)
        xs = board.public_xs
        middle = participants[1]
        for j in range(3):
            expected = (xs[0][j] * pow(xs[2][j], -1, params.p)) % params.p
            assert middle.t_values[j] == expected

    def test_first_and_last(self, rng):
        params = TOY_GROUP
        participants, board = make_participants(params, [3, 5], 3, rng)
        xs = board.public_xs
        for j in range(3):
            assert participants[0].t_values[j] == pow(xs[1][j], -1, params.p)
            assert participants[1].t_values[j] == xs[0][j]

    def test_telescoping_identity(self, rng):
        """prod_i T_i^x_i == 1 at every position."""
        params = MODP_2048
        participants, _ = make_participants(params, [1, 2, 3, 4, 5], 3, rng)
        for j in range(3):
            product = 1
            for p in participants:
                product = product * pow(p.t_values[j], p.secret_pairs[j].x, params.p) % params.p
            assert product == 1

    def test_single_participant_has_identity_t(self, rng):
        participants, _ = make_participants(TOY_GROUP, [9], 4, rng)
        assert participants[0].t_values == [1, 1, 1, 1]

    def test_shape_mismatch(self, rng):
        p = ParticipantState.create(TOY_GROUP, 3, 0, 4, 2, rng)
        with pytest.raises(PreconditionViolation, match="public_xs"):
            p.compute_t(TOY_GROUP, [[1, 1, 1, 1]])


class TestPublishedTerm:

    def test_requires_t_values(self, rng):
        p = ParticipantState.create(TOY_GROUP, 3, 0, 4, 1, rng)
        with pytest.raises(PreconditionViolation):
            p.published_term(TOY_GROUP, 0, False)

    def test_zero_bit_active_uses_s(self, rng):
        participants, _ = make_participants(MODP_2048, [0b01, 0b11], 2, rng)
        p = participants[0]
        expected = pow(p.t_values[0], p.secret_pairs[0].s, MODP_2048.p)
        assert p.published_term(MODP_2048, 0, False) == expected

    def test_zero_bit_lost_uses_x(self, rng):
        participants, _ = make_participants(MODP_2048, [0b01, 0b11], 2, rng)
        p = participants[0]
        expected = pow(p.t_values[0], p.secret_pairs[0].x, MODP_2048.p)
        assert p.published_term(MODP_2048, 0, True) == expected

    def test_one_bit_uses_x(self, rng):
        participants, _ = make_participants(MODP_2048, [0b01, 0b11], 2, rng)
        p = participants[1]
        expected = pow(p.t_values[0], p.secret_pairs[0].x, MODP_2048.p)
        assert p.published_term(MODP_2048, 0, False) == expected

    def test_eliminate_is_sticky(self, rng):
        p = ParticipantState.create(TOY_GROUP, 3, 0, 4, 1, rng)
        p.eliminate()
        p.eliminate()
        assert p.is_lost


class TestBitDisclosure:

    def test_every_disclosure_verifies(self, rng):
        p = ParticipantState.create(TOY_GROUP, 0b101101, 0, 6, 1, rng)
        disclosures = p.disclose_bits(TOY_GROUP, rng)
        assert [d.position for d in disclosures] == list(range(6))
        for d in disclosures:
            assert verify_bit_proof(TOY_GROUP, p.commitment, d.value, d.proof, d.position)

    def test_values_are_fresh(self, rng):
        p = ParticipantState.create(MODP_2048, 0b11, 0, 2, 1, rng)
        first = p.disclose_bits(MODP_2048, rng)
        second = p.disclose_bits(MODP_2048, rng)
        assert first[0].value != second[0].value


class TestPublicBoard:

    def test_collects_broadcast_values(self, rng):
        participants, board = make_participants(TOY_GROUP, [1, 2, 3], 2, rng)
        assert board.n_participants == 3
        assert board.commitments[2] == participants[2].commitment
        assert board.public_xs[1] == tuple(pair.x for pair in participants[1].public_pairs)
