"""Shared utilities: logging, input validation, benchmarks."""
