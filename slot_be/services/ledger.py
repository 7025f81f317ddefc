from decimal import Decimal

from slot_be.exceptions import ValidationException
from slot_be.error_codes import ErrorCodes

# balance * multiplier must reach this for a paid spin to be allowed
PLAY_THRESHOLD = Decimal('1')
DEFAULT_FREE_SPIN_GRANT = 10

def is_whole_cents(amount):
    """True when a Decimal amount has at most two decimal places, matching the Numeric(18,2) columns."""
    return amount.as_tuple().exponent >= -2

# Every function below mutates an Account that the caller has already loaded
# under a row lock. None of them commit; the caller owns the transaction.

def can_play(account, bet_amount=None):
    '''
    Returns True when the account may spin.

    The check is a fixed playability threshold, not a comparison against the
    requested bet: `bet_amount` is accepted for symmetry with the spin call
    and ignored.
    '''
    if account.free_spins > 0:
        return True
    return Decimal(account.balance) * account.multiplier >= PLAY_THRESHOLD

def consume_for_spin(account):
    """Uses one free spin if available. Returns whether one was used."""
    if account.free_spins > 0:
        account.free_spins -= 1
        return True
    return False

def debit_bet(account, amount):
    account.balance = Decimal(account.balance) - Decimal(amount)

def apply_win(account, win_amount):
    # Applied on every spin, including losing ones where win_amount is 0
    account.balance = Decimal(account.balance) + Decimal(win_amount)

def grant_free_spins(account, count=DEFAULT_FREE_SPIN_GRANT):
    if count < 0:
        raise ValidationException("Free spin count cannot be negative.", error_code=ErrorCodes.INVALID_AMOUNT)
    account.free_spins += count

def add_cash(account, amount):
    account.balance = Decimal(account.balance) + Decimal(amount)

def cashout(account):
    '''Empties the balance and returns what it held (0 for an empty account).'''
    amount = Decimal(account.balance)
    account.balance = Decimal('0.00')
    return amount
