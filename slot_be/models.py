from flask_sqlalchemy import SQLAlchemy
from datetime import datetime, timezone
from decimal import Decimal
from sqlalchemy import CheckConstraint, JSON, Numeric

db = SQLAlchemy()

DEFAULT_ACCOUNT_BALANCE = Decimal('10.00')

def _utcnow():
    return datetime.now(timezone.utc)

class Account(db.Model):
    __tablename__ = 'account'
    __table_args__ = (
        CheckConstraint('free_spins >= 0', name='ck_account_free_spins_non_negative'),
        CheckConstraint('multiplier >= 1 AND multiplier <= 10', name='ck_account_multiplier_range'),
    )

    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(50), unique=True, nullable=False, index=True)
    balance = db.Column(Numeric(18, 2), default=DEFAULT_ACCOUNT_BALANCE, nullable=False)
    free_spins = db.Column(db.Integer, default=0, nullable=False)
    multiplier = db.Column(db.Integer, default=1, nullable=False)
    # onupdate fires on every flushed UPDATE of the row, i.e. at commit time
    modified_at = db.Column(db.DateTime(timezone=True), default=_utcnow, onupdate=_utcnow, nullable=False)

    spins = db.relationship('SpinRecord', back_populates='account', lazy='dynamic',
                            order_by='SpinRecord.spin_time.desc()')

    def __repr__(self):
        return f"<Account {self.username} (Balance: {self.balance}, Free spins: {self.free_spins})>"

class SpinRecord(db.Model):
    __tablename__ = 'spin_record'
    id = db.Column(db.Integer, primary_key=True)
    account_id = db.Column(db.Integer, db.ForeignKey('account.id'), nullable=False, index=True)
    spin_time = db.Column(db.DateTime(timezone=True), default=_utcnow, nullable=False, index=True)
    drawn_symbols = db.Column(JSON, nullable=False) # Ordered list of exactly three symbol names
    bet_amount = db.Column(Numeric(18, 2), nullable=False)
    win_amount = db.Column(Numeric(18, 2), default=Decimal('0.00'), nullable=False)
    is_win = db.Column(db.Boolean, default=False, nullable=False)
    used_free_spin = db.Column(db.Boolean, default=False, nullable=False)

    account = db.relationship('Account', back_populates='spins')

    @property
    def spin_result(self):
        return ",".join(self.drawn_symbols or [])

    def __repr__(self):
        return f"<SpinRecord {self.id} (Account: {self.account_id}, Bet: {self.bet_amount}, Win: {self.win_amount})>"

class Symbol(db.Model):
    __tablename__ = 'symbol'
    __table_args__ = (
        CheckConstraint('weight >= 0', name='ck_symbol_weight_non_negative'),
    )

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(20), unique=True, nullable=False)
    value = db.Column(Numeric(18, 2), nullable=False) # Payout per unit bet on three of a kind
    weight = db.Column(db.Integer, nullable=False) # Relative frequency on the reel

    def __repr__(self):
        return f"<Symbol {self.name} (Value: {self.value}, Weight: {self.weight})>"
