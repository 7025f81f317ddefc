from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP

DEFAULT_BONUS_SYMBOL_NAME = 'Bonus'

# Free spins awarded per number of bonus symbols in a draw.
# Three bonus symbols award 10, not 15.
BONUS_FREE_SPINS_TABLE = {0: 0, 1: 5, 2: 10, 3: 10}

CENT = Decimal('0.01')


@dataclass(frozen=True)
class SpinOutcome:
    is_win: bool
    win_amount: Decimal
    bonus_count: int
    bonus_free_spins_awarded: int


def bonus_free_spins(bonus_count):
    """Returns the free spins awarded for `bonus_count` bonus symbols in one draw."""
    try:
        return BONUS_FREE_SPINS_TABLE[bonus_count]
    except KeyError:
        raise ValueError(f"Bonus symbol count must be between 0 and 3, got {bonus_count}")


def is_three_of_a_kind(names):
    return len(names) == 3 and names[0] == names[1] == names[2]


def calculate_win_amount(symbol_value, bet_amount):
    """Payout for a three-of-a-kind: symbol value times the bet, rounded to cents."""
    amount = Decimal(str(symbol_value)) * Decimal(str(bet_amount))
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


def evaluate(drawn_symbols, bet_amount, bonus_symbol_name=DEFAULT_BONUS_SYMBOL_NAME):
    """
    Evaluates a three-symbol draw.

    Win and bonus are evaluated independently from the same draw: a draw of
    three bonus symbols is a win paying the bonus symbol's value and also
    awards the maximum bonus tier.

    Args:
        drawn_symbols (list): The three drawn symbols (objects with `name` and `value`).
        bet_amount (Decimal): The amount wagered on this spin.
        bonus_symbol_name (str): Name of the symbol that awards free spins.

    Returns:
        SpinOutcome
    """
    names = [s.name for s in drawn_symbols]

    is_win = is_three_of_a_kind(names)
    if is_win:
        win_amount = calculate_win_amount(drawn_symbols[0].value, bet_amount)
    else:
        win_amount = Decimal('0.00')

    bonus_count = names.count(bonus_symbol_name)

    return SpinOutcome(
        is_win=is_win,
        win_amount=win_amount,
        bonus_count=bonus_count,
        bonus_free_spins_awarded=bonus_free_spins(bonus_count),
    )
