import secrets
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation
from flask import current_app
from sqlalchemy import select

from slot_be.models import db, Account, SpinRecord
from slot_be.exceptions import AccountNotFoundException, PlayNotAllowedException, ValidationException
from slot_be.error_codes import ErrorCodes
from slot_be.services import ledger
from slot_be.services.symbol_service import load_symbol_table
from slot_be.utils.outcome_evaluator import DEFAULT_BONUS_SYMBOL_NAME, evaluate
from slot_be.utils.weighted_selector import draw_three
from slot_be.utils.audit_logger import AuditLogger

DEFAULT_BET_AMOUNT = Decimal('1.00')


# --- Helper Functions for handle_spin ---

def _validate_bet_amount(bet_amount):
    """
    Normalises the bet to a Decimal and checks that it is a positive amount
    of whole cents.

    Raises:
        ValidationException: If the bet is not a positive number, or has more than two decimal places.
    """
    try:
        bet = Decimal(str(bet_amount))
    except (InvalidOperation, TypeError, ValueError):
        raise ValidationException("Bet amount must be a number.", error_code=ErrorCodes.INVALID_BET,
                                  details={'bet_amount': str(bet_amount)})
    if not bet.is_finite() or bet <= 0:
        raise ValidationException("Bet amount must be positive.", error_code=ErrorCodes.INVALID_BET,
                                  details={'bet_amount': str(bet_amount)})
    # The balance column stores cents; a finer bet would be rounded away on write
    if not ledger.is_whole_cents(bet):
        raise ValidationException("Bet amount cannot have more than two decimal places.",
                                  error_code=ErrorCodes.INVALID_BET, details={'bet_amount': str(bet_amount)})
    return bet

def load_account_for_update(account_id):
    """
    Loads the account row under a row lock for the rest of the transaction.

    Concurrent spins against the same account serialize here; spins against
    other accounts are unaffected.

    Raises:
        AccountNotFoundException: If no account has this id.
    """
    account = db.session.execute(
        select(Account).filter_by(id=account_id).with_for_update()
    ).scalar_one_or_none()
    if account is None:
        raise AccountNotFoundException(details={'account_id': account_id})
    return account

def _settle_spin(account, outcome, used_free_spin, bet_amount):
    """
    Applies the financial effect of an evaluated spin to the locked account.

    Order: bonus free spins are granted first, then the spin is paid for
    (with the free spin that was available before the draw, otherwise with
    the bet), then the win is credited, even when it is 0.
    """
    if outcome.bonus_free_spins_awarded > 0:
        ledger.grant_free_spins(account, outcome.bonus_free_spins_awarded)

    if used_free_spin:
        ledger.consume_for_spin(account)
    else:
        ledger.debit_bet(account, bet_amount)

    ledger.apply_win(account, outcome.win_amount)

def _create_spin_record(account, drawn_symbols, bet_amount, outcome, used_free_spin):
    spin = SpinRecord(
        account=account,
        drawn_symbols=[s.name for s in drawn_symbols],
        bet_amount=bet_amount,
        win_amount=outcome.win_amount,
        is_win=outcome.is_win,
        used_free_spin=used_free_spin,
        spin_time=datetime.now(timezone.utc)
    )
    db.session.add(spin)
    return spin

def _log_committed_spin(spin, outcome, balance_before, balance_after, free_spins_after):
    AuditLogger.log_financial_event(
        event_type='slot_spin',
        account_id=spin.account_id,
        amount=Decimal('0.00') if spin.used_free_spin else -spin.bet_amount,
        balance_before=balance_before,
        balance_after=balance_after,
        details={'spin_id': spin.id, 'used_free_spin': spin.used_free_spin}
    )
    if outcome.win_amount > 0:
        AuditLogger.log_financial_event(
            event_type='slot_win',
            account_id=spin.account_id,
            amount=outcome.win_amount,
            balance_before=balance_before,
            balance_after=balance_after,
            details={'spin_id': spin.id, 'spin_result': spin.spin_result}
        )
    if outcome.bonus_free_spins_awarded > 0:
        AuditLogger.log_game_event(
            event_type='bonus_free_spins_awarded',
            account_id=spin.account_id,
            spin_id=spin.id,
            details={
                'bonus_count': outcome.bonus_count,
                'free_spins_awarded': outcome.bonus_free_spins_awarded,
                'free_spins_after': free_spins_after
            }
        )

# --- Main Spin Handler ---
def handle_spin(account_id, bet_amount=DEFAULT_BET_AMOUNT, rng=None, bonus_symbol_name=None):
    """
    Runs one spin for an account as a single transaction.

    The account row is locked, checked for eligibility, three symbols are
    drawn and evaluated, the result is settled on the account and a spin
    record is added; both are committed together. Any failure before the
    commit rolls the session back, leaving the account and the spin history
    exactly as they were.

    Args:
        account_id (int): The spinning account.
        bet_amount (Decimal): Amount wagered. Debited only when no free spin is available.
        rng: Random source exposing `randint(a, b)`. Defaults to `secrets.SystemRandom()`.
        bonus_symbol_name (str): Symbol awarding free spins. Defaults to the BONUS_SYMBOL_NAME setting.

    Returns:
        SpinRecord: The committed spin.

    Raises:
        AccountNotFoundException: Unknown account id.
        PlayNotAllowedException: No free spins and balance * multiplier below 1.
        ValidationException: Non-positive bet.
        ConfigurationException: Empty symbol table or zero total weight.
    """
    rng = rng or secrets.SystemRandom()
    if bonus_symbol_name is None:
        bonus_symbol_name = current_app.config.get('BONUS_SYMBOL_NAME', DEFAULT_BONUS_SYMBOL_NAME)

    try:
        bet = _validate_bet_amount(bet_amount)
        account = load_account_for_update(account_id)

        if not ledger.can_play(account, bet):
            raise PlayNotAllowedException(details={
                'account_id': account.id,
                'balance': str(account.balance),
                'free_spins': account.free_spins,
                'multiplier': account.multiplier
            })

        used_free_spin = account.free_spins > 0
        drawn_symbols = draw_three(load_symbol_table(), rng)
        outcome = evaluate(drawn_symbols, bet, bonus_symbol_name)

        balance_before = Decimal(account.balance)
        _settle_spin(account, outcome, used_free_spin, bet)
        spin = _create_spin_record(account, drawn_symbols, bet, outcome, used_free_spin)

        db.session.commit()
    except Exception:
        db.session.rollback()
        raise

    current_app.logger.info(
        f"Account {account.id} spin {spin.id}: {spin.spin_result} bet {bet} win {outcome.win_amount} "
        f"free_spin={used_free_spin} balance {balance_before} -> {account.balance}"
    )
    _log_committed_spin(spin, outcome, balance_before, account.balance, account.free_spins)
    return spin
