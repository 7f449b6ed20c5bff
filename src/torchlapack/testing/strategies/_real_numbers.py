import hypothesis.strategies


def real_numbers(
    min_value: float = -1e3,
    max_value: float = 1e3,
    exclude_zero: bool = False,
) -> hypothesis.strategies.SearchStrategy[float]:
    """Strategy for finite real numbers, optionally nonzero."""
    strategy = hypothesis.strategies.floats(
        min_value=min_value,
        max_value=max_value,
        allow_nan=False,
        allow_infinity=False,
        allow_subnormal=False,
    )

    if exclude_zero:
        strategy = strategy.filter(lambda x: x != 0.0)

    return strategy
