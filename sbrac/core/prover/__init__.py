"""Zero-knowledge proofs of bit correctness"""
from sbrac.core.prover.bit_proof import (
    BitProof,
    compute_challenge,
    commit_bit,
    generate_bit_proof,
    verify_bit_proof,
)

__all__ = [
    "BitProof",
    "compute_challenge",
    "commit_bit",
    "generate_bit_proof",
    "verify_bit_proof",
]
