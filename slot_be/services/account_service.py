from decimal import Decimal, InvalidOperation
from flask import current_app
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from slot_be.models import db, Account, SpinRecord
from slot_be.exceptions import AccountNotFoundException, ValidationException
from slot_be.error_codes import ErrorCodes
from slot_be.services import ledger
from slot_be.utils.spin_handler import load_account_for_update
from slot_be.utils.audit_logger import AuditLogger


def get_account(account_id):
    return db.session.get(Account, account_id)

def get_account_by_name(username):
    return db.session.scalar(select(Account).filter_by(username=username))

def list_accounts():
    return list(db.session.scalars(select(Account).order_by(Account.id)))

def require_account(account_id):
    account = get_account(account_id)
    if account is None:
        raise AccountNotFoundException(details={'account_id': account_id})
    return account

def create_or_get_account(username):
    '''
    Registers a display name, returning the existing account if the name is taken.

    Two concurrent registrations of the same name race on the unique index;
    the loser rolls back and returns the winner's row.
    '''
    username = (username or '').strip()
    if not username:
        raise ValidationException("Username is required.")

    existing = get_account_by_name(username)
    if existing is not None:
        return existing

    account = Account(username=username)
    db.session.add(account)
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        existing = get_account_by_name(username)
        if existing is None:
            raise
        current_app.logger.info(f"Concurrent registration of '{username}' resolved to account {existing.id}.")
        return existing

    current_app.logger.info(f"Account {account.id} registered for '{username}' with balance {account.balance}.")
    return account

def grant_free_spins(account_id, count=None):
    """Administrative free spin grant. Defaults to the DEFAULT_FREE_SPIN_GRANT setting."""
    if count is None:
        count = current_app.config.get('DEFAULT_FREE_SPIN_GRANT', ledger.DEFAULT_FREE_SPIN_GRANT)
    try:
        account = load_account_for_update(account_id)
        ledger.grant_free_spins(account, count)
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise

    AuditLogger.log_game_event(
        event_type='free_spins_granted',
        account_id=account.id,
        details={'count': count, 'free_spins_after': account.free_spins}
    )
    return account

def add_cash(account_id, amount):
    try:
        try:
            amount = Decimal(str(amount))
        except InvalidOperation:
            raise ValidationException("Amount must be a number.", error_code=ErrorCodes.INVALID_AMOUNT,
                                      details={'amount': str(amount)})
        if not amount.is_finite() or amount <= 0:
            raise ValidationException("Amount must be positive.", error_code=ErrorCodes.INVALID_AMOUNT,
                                      details={'amount': str(amount)})
        if not ledger.is_whole_cents(amount):
            raise ValidationException("Amount cannot have more than two decimal places.",
                                      error_code=ErrorCodes.INVALID_AMOUNT, details={'amount': str(amount)})
        account = load_account_for_update(account_id)
        balance_before = Decimal(account.balance)
        ledger.add_cash(account, amount)
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise

    AuditLogger.log_financial_event(
        event_type='deposit',
        account_id=account.id,
        amount=amount,
        balance_before=balance_before,
        balance_after=account.balance
    )
    return account

def cashout(account_id):
    """Pays out the whole balance. Returns the amount paid, 0 for an empty account."""
    try:
        account = load_account_for_update(account_id)
        amount = ledger.cashout(account)
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise

    AuditLogger.log_financial_event(
        event_type='cashout',
        account_id=account.id,
        amount=-amount,
        balance_before=amount,
        balance_after=account.balance
    )
    return amount

def get_spin_history(account_id, limit=None):
    """Most recent spins first."""
    if limit is None:
        limit = current_app.config.get('SPIN_HISTORY_LIMIT', 20)
    require_account(account_id)
    return list(db.session.scalars(
        select(SpinRecord)
        .filter_by(account_id=account_id)
        .order_by(SpinRecord.spin_time.desc(), SpinRecord.id.desc())
        .limit(limit)
    ))
