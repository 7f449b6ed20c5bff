"""Exception classes for torchlapack."""


class LapackError(Exception):
    """Base exception for torchlapack errors."""

    pass


class IllegalArgumentError(LapackError, ValueError):
    """Raised when a routine is called with an illegal argument.

    Parameters
    ----------
    routine : str
        Name of the routine that rejected its arguments.
    position : int
        One-based position of the first offending argument.
    """

    def __init__(self, routine: str, position: int):
        self.routine = routine
        self.position = position

        super().__init__(
            f"On entry to {routine} parameter number {position} had an "
            f"illegal value"
        )


class ConvergenceWarning(UserWarning):
    """Warning for eigenvalue iterations that exhaust their budget."""

    pass


def report_illegal_argument(routine: str, position: int) -> None:
    """Abort a call whose argument at ``position`` is invalid.

    Raises
    ------
    IllegalArgumentError
        Always.
    """
    raise IllegalArgumentError(routine, position)
