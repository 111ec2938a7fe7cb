"""
Tests for bit proofs.

Tests cover:
1. Completeness for both bit values
2. Rejection of tampered or mismatched proofs
3. Challenge computation
4. Serialization
"""

import pytest

from sbrac.crypto import DeterministicRandom, MODP_2048, TOY_GROUP
from sbrac.core.auction import commit_bid
from sbrac.core.errors import InvalidBitError, PreconditionViolation
from sbrac.core.prover import (
    BitProof,
    commit_bit,
    compute_challenge,
    generate_bit_proof,
    verify_bit_proof,
)


@pytest.fixture
def rng():
    return DeterministicRandom(seed=31337)


def make_proof(params, bit, position, rng):
    commitment, _ = commit_bid(params, 5, rng)
    value, t, s = commit_bit(params, bit, rng)
    proof = generate_bit_proof(params, commitment, value, t, s, bit, position, rng)
    return commitment, value, proof


class TestCompleteness:

    @pytest.mark.parametrize("bit", [0, 1])
    def test_toy_group(self, rng, bit):
        for position in range(6):
            commitment, value, proof = make_proof(TOY_GROUP, bit, position, rng)
            assert verify_bit_proof(TOY_GROUP, commitment, value, proof, position)

    @pytest.mark.parametrize("bit", [0, 1])
    def test_modp_group(self, rng, bit):
        commitment, value, proof = make_proof(MODP_2048, bit, 3, rng)
        assert verify_bit_proof(MODP_2048, commitment, value, proof, 3)

    def test_accepts_raw_commitment_value(self, rng):
        commitment, value, proof = make_proof(MODP_2048, 1, 0, rng)
        assert verify_bit_proof(MODP_2048, commitment.value, value, proof, 0)

    def test_default_randomness(self):
        commitment, _ = commit_bid(MODP_2048, 1)
        value, t, s = commit_bit(MODP_2048, 0)
        proof = generate_bit_proof(MODP_2048, commitment, value, t, s, 0, 0)
        assert verify_bit_proof(MODP_2048, commitment, value, proof, 0)


class TestBitCommitment:

    def test_value_structure(self, rng):
        params = TOY_GROUP
        value0, t0, s0 = commit_bit(params, 0, rng)
        value1, t1, s1 = commit_bit(params, 1, rng)
        assert value0 == params.commit(t0, s0)
        assert value1 == params.mul(params.commit(t1, s1), params.g)

    @pytest.mark.parametrize("bad", [2, -1, True])
    def test_invalid_bit(self, rng, bad):
        with pytest.raises(InvalidBitError):
            commit_bit(TOY_GROUP, bad, rng)

    @pytest.mark.parametrize("bad", [2, -1, True])
    def test_invalid_bit_in_proof(self, rng, bad):
        with pytest.raises(InvalidBitError):
            generate_bit_proof(TOY_GROUP, 1, 1, 1, 1, bad, 0, rng)

    def test_negative_position(self, rng):
        commitment, _ = commit_bid(TOY_GROUP, 1, rng)
        value, t, s = commit_bit(TOY_GROUP, 0, rng)
        with pytest.raises(PreconditionViolation):
            generate_bit_proof(TOY_GROUP, commitment, value, t, s, 0, -1, rng)


class TestSoundness:
    """Rejection cases, run over the large group."""

    @pytest.fixture
    def honest(self, rng):
        return make_proof(MODP_2048, 1, 4, rng)

    def test_wrong_position(self, honest):
        commitment, value, proof = honest
        assert not verify_bit_proof(MODP_2048, commitment, value, proof, 5)

    def test_negative_position(self, honest):
        commitment, value, proof = honest
        assert not verify_bit_proof(MODP_2048, commitment, value, proof, -1)

    def test_tampered_value(self, honest):
        commitment, value, proof = honest
        tampered = MODP_2048.mul(value, MODP_2048.g)
        assert not verify_bit_proof(MODP_2048, commitment, tampered, proof, 4)

    def test_other_commitment(self, honest, rng):
        _, value, proof = honest
        other, _ = commit_bid(MODP_2048, 5, rng)
        assert not verify_bit_proof(MODP_2048, other, value, proof, 4)

    def test_tampered_response(self, honest):
        commitment, value, proof = honest
        data = proof.to_dict()
        data["z1"] = (proof.z1 + 1) % MODP_2048.q
        assert not verify_bit_proof(MODP_2048, commitment, value, BitProof.from_dict(data), 4)

    def test_swapped_challenges(self, honest):
        commitment, value, proof = honest
        data = proof.to_dict()
        data["c1"], data["c2"] = data["c2"], data["c1"]
        assert not verify_bit_proof(MODP_2048, commitment, value, BitProof.from_dict(data), 4)

    def test_out_of_range_scalar(self, honest):
        commitment, value, proof = honest
        data = proof.to_dict()
        data["c1"] = MODP_2048.q
        assert not verify_bit_proof(MODP_2048, commitment, value, BitProof.from_dict(data), 4)

    def test_value_not_in_group(self, honest):
        commitment, _, proof = honest
        assert not verify_bit_proof(MODP_2048, commitment, 0, proof, 4)

    def test_value_encoding_two(self, rng):
        """A value hiding g^2 cannot be proven as either bit."""
        params = MODP_2048
        commitment, _ = commit_bid(params, 5, rng)
        t = rng.randbelow(params.q)
        s = rng.randbelow(params.q)
        value = params.mul(params.commit(t, s), params.exp(params.g, 2))
        for claimed in (0, 1):
            proof = generate_bit_proof(params, commitment, value, t, s, claimed, 0, rng)
            assert not verify_bit_proof(params, commitment, value, proof, 0)


class TestChallenge:

    def test_deterministic(self):
        a = compute_challenge(TOY_GROUP, 10, 20, 30, 40, 2)
        b = compute_challenge(TOY_GROUP, 10, 20, 30, 40, 2)
        assert a == b
        assert 0 <= a < TOY_GROUP.q

    def test_binds_every_input(self):
        base = compute_challenge(MODP_2048, 10, 20, 30, 40, 2)
        assert compute_challenge(MODP_2048, 11, 20, 30, 40, 2) != base
        assert compute_challenge(MODP_2048, 10, 21, 30, 40, 2) != base
        assert compute_challenge(MODP_2048, 10, 20, 31, 40, 2) != base
        assert compute_challenge(MODP_2048, 10, 20, 30, 41, 2) != base
        assert compute_challenge(MODP_2048, 10, 20, 30, 40, 3) != base


class TestSerialization:

    def test_dict_roundtrip_still_verifies(self, rng):
        commitment, value, proof = make_proof(MODP_2048, 0, 1, rng)
        data = proof.to_dict()
        assert set(data) == {"c1", "c2", "z1", "z2", "w", "v", "a1", "a2"}
        assert all(isinstance(v, str) for v in data.values())
        restored = BitProof.from_dict(data)
        assert restored == proof
        assert verify_bit_proof(MODP_2048, commitment, value, restored, 1)

    def test_from_dict_accepts_ints(self):
        data = {"c1": 1, "c2": 2, "z1": 3, "z2": 4, "w": 5, "v": 6, "a1": 7, "a2": 8}
        proof = BitProof.from_dict(data)
        assert proof.scalars == (1, 2, 3, 4, 5, 6)
        assert (proof.a1, proof.a2) == (7, 8)

    def test_immutable(self, rng):
        _, _, proof = make_proof(TOY_GROUP, 0, 0, rng)
        with pytest.raises(AttributeError):
            proof.c1 = 0
