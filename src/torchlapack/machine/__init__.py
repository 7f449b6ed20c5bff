"""
Machine constants and tuning parameters.

Functions
---------
machine_parameter
    Double-precision machine constants selected by letter.
tuning_parameter
    Recommended shift counts and block sizes for a given window.

Classes
-------
TuningParameter
    Selectors accepted by :func:`tuning_parameter`.
"""

from torchlapack.machine._machine_parameter import machine_parameter
from torchlapack.machine._tuning_parameter import (
    TuningParameter,
    tuning_parameter,
)

__all__ = [
    "TuningParameter",
    "machine_parameter",
    "tuning_parameter",
]
