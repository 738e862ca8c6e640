"""Integer helpers for page arithmetic."""


def ceil_div(numerator: int, denominator: int) -> int:
    """Divide rounding up. Both operands must be non-negative, denominator positive."""
    return (numerator + denominator - 1) // denominator
