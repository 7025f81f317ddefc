import secrets

from slot_be.exceptions import ConfigurationException

REELS = 3


def draw_one(symbols, rng=None):
    """
    Draws a single symbol with probability proportional to its weight.

    A uniform integer r in [1, W] is drawn, W being the total weight, and the
    table is walked in order accumulating weight until the running total
    reaches r. Each symbol is therefore selected with probability weight / W,
    and a weight of 0 can never be selected.

    Args:
        symbols (list): Symbol table entries; each must expose an integer `weight`.
        rng: Random source exposing `randint(a, b)`. Defaults to `secrets.SystemRandom()`.

    Returns:
        The selected entry of `symbols`.

    Raises:
        ConfigurationException: If the table is empty or its total weight is not positive.
    """
    if not symbols:
        raise ConfigurationException("No symbols found in the symbol table.")

    total_weight = sum(s.weight for s in symbols)
    if total_weight <= 0:
        raise ConfigurationException(
            "Symbol table has no positive weight.",
            details={'total_weight': total_weight}
        )

    rng = rng or secrets.SystemRandom()
    random_value = rng.randint(1, total_weight)

    current_weight = 0
    for symbol in symbols:
        current_weight += symbol.weight
        if random_value <= current_weight:
            return symbol

    # Unreachable while weights are non-negative integers
    raise ConfigurationException(
        "Weighted draw fell outside the symbol table.",
        details={'total_weight': total_weight, 'random_value': random_value}
    )


def draw_three(symbols, rng=None):
    """Draws one symbol per reel. Draws are independent, so repeats are expected."""
    rng = rng or secrets.SystemRandom()
    return [draw_one(symbols, rng) for _ in range(REELS)]
