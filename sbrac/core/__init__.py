"""SBRAC core: auction engine, bid commitments, bit proofs, configuration."""
