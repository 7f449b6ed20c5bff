def same_letter(ca: str, cb: str) -> bool:
    """Case-insensitive comparison of two single-letter options.

    Only the first character of each argument is inspected, so ``"Upper"``
    and ``"u"`` match.

    Examples
    --------
    >>> same_letter("t", "T")
    True
    >>> same_letter("N", "T")
    False
    """
    if not ca or not cb:
        return False

    return ca[0].upper() == cb[0].upper()
