"""
Error kinds for SBRAC.

PreconditionViolation and its subclasses are raised before any protocol
round runs. RandomSourceError and ModularInverseError are fatal: they
signal missing entropy or a parameter/implementation bug. A rejected proof
is not an error; verification returns False.
"""


class SbracError(Exception):
    """Base class for all SBRAC errors."""


class PreconditionViolation(SbracError, ValueError):
    """Malformed input: bid out of range, negative bid, length mismatch."""


class InvalidGroupParameters(PreconditionViolation):
    """Group parameters violate p, q prime, q | p - 1 or generator order."""


class RoundOrderError(PreconditionViolation):
    """A round was requested out of MSB-first order or after termination."""


class InvalidBitError(SbracError, ValueError):
    """A bit argument was neither 0 nor 1."""


class RandomSourceError(SbracError, RuntimeError):
    """The secure random source is unavailable."""


class ModularInverseError(SbracError, ArithmeticError):
    """Attempted inverse of a non-invertible element."""


__all__ = [
    "SbracError",
    "PreconditionViolation",
    "InvalidGroupParameters",
    "RoundOrderError",
    "InvalidBitError",
    "RandomSourceError",
    "ModularInverseError",
]
