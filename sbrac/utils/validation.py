"""
Input Validation - Precondition checks for auction and proof inputs.

Every validator returns (is_valid, error_message). Callers that must
fail fast turn a negative result into PreconditionViolation before any
protocol round starts; nothing is silently truncated.
"""

from typing import Any, Sequence, Tuple

# =============================================================================
# Constants
# =============================================================================

# Bound on bit length; rounds are sequential, one per bit
MAX_BIT_LENGTH = 256

# Bound on participant count
MAX_PARTICIPANTS = 1024


# =============================================================================
# Validation Functions
# =============================================================================


def validate_integer(
    value: Any,
    name: str,
    min_val: int = 0,
    max_val: int = None,
) -> Tuple[bool, str]:
    """
    Validate integer within bounds.

    bool is rejected even though it subclasses int.

    Args:
        value: Value to validate
        name: Field name for errors
        min_val: Minimum allowed value
        max_val: Maximum allowed value (inclusive), or None for unbounded

    Returns:
        (is_valid, error_message)
    """
    if isinstance(value, bool) or not isinstance(value, int):
        return False, f"{name} must be int, got {type(value).__name__}"

    if value < min_val:
        return False, f"{name} must be >= {min_val}, got {value}"

    if max_val is not None and value > max_val:
        return False, f"{name} must be <= {max_val}, got {value}"

    return True, ""


def validate_bit_length(bit_length: Any) -> Tuple[bool, str]:
    """Validate the agreed bid bit length."""
    return validate_integer(bit_length, "bit_length", min_val=1, max_val=MAX_BIT_LENGTH)


def validate_bid(bid: Any, bit_length: int, name: str = "bid") -> Tuple[bool, str]:
    """Validate 0 <= bid < 2^bit_length."""
    return validate_integer(bid, name, min_val=0, max_val=(1 << bit_length) - 1)


def validate_bids(bids: Any, bit_length: Any) -> Tuple[bool, str]:
    """
    Validate a full bid list against the bit length.

    Args:
        bids: Sequence of bids, one per participant
        bit_length: Agreed bit length L

    Returns:
        (is_valid, error_message)
    """
    valid, err = validate_bit_length(bit_length)
    if not valid:
        return False, err

    if isinstance(bids, (str, bytes)) or not isinstance(bids, Sequence):
        return False, f"bids must be a sequence, got {type(bids).__name__}"

    if len(bids) > MAX_PARTICIPANTS:
        return False, f"bids exceeds max participants {MAX_PARTICIPANTS}"

    for i, bid in enumerate(bids):
        valid, err = validate_bid(bid, bit_length, name=f"bids[{i}]")
        if not valid:
            return False, err

    return True, ""


def validate_participant_index(index: Any, n_participants: int) -> Tuple[bool, str]:
    """Validate 0 <= index < n_participants."""
    return validate_integer(index, "participant_id", min_val=0, max_val=n_participants - 1)


def validate_scalar(value: Any, q: int, name: str = "scalar") -> Tuple[bool, str]:
    """Validate an exponent in [0, q)."""
    return validate_integer(value, name, min_val=0, max_val=q - 1)


def validate_matrix_shape(
    matrix: Any,
    rows: int,
    cols: int,
    name: str = "matrix",
) -> Tuple[bool, str]:
    """Validate a rows x cols list of lists."""
    if len(matrix) != rows:
        return False, f"{name} must have {rows} rows, got {len(matrix)}"

    for i, row in enumerate(matrix):
        if len(row) != cols:
            return False, f"{name}[{i}] must have {cols} entries, got {len(row)}"

    return True, ""


# =============================================================================
# Module Exports
# =============================================================================

__all__ = [
    "validate_integer",
    "validate_bit_length",
    "validate_bid",
    "validate_bids",
    "validate_participant_index",
    "validate_scalar",
    "validate_matrix_shape",
    "MAX_BIT_LENGTH",
    "MAX_PARTICIPANTS",
]
