"""Hypothesis strategies for eigenvalue routine testing."""

from ._hessenberg_matrices import hessenberg_matrices
from ._real_numbers import real_numbers
from ._two_by_two_blocks import two_by_two_blocks

__all__ = [
    # Numeric strategies
    "real_numbers",
    # Matrix strategies
    "hessenberg_matrices",
    "two_by_two_blocks",
]
