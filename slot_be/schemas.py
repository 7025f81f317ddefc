from decimal import Decimal
from marshmallow import Schema, fields, ValidationError, validates, pre_load
from marshmallow_sqlalchemy import SQLAlchemyAutoSchema, auto_field
from marshmallow.validate import Range, Length, Regexp

from .models import db, Account, SpinRecord, Symbol
from .services.ledger import can_play, is_whole_cents

MAX_AMOUNT = Decimal('1000000')

def validate_amount(amount):
    """Validate monetary amounts"""
    if amount <= 0:
        raise ValidationError('Amount must be greater than zero.')

    if amount > MAX_AMOUNT:
        raise ValidationError('Amount exceeds maximum allowed value.')

    return amount

def validate_two_decimal_places(amount):
    if not is_whole_cents(amount):
        raise ValidationError('Amount cannot have more than two decimal places.')

# --- Model Schemas ---

class AccountSchema(SQLAlchemyAutoSchema):
    class Meta:
        model = Account
        load_instance = True
        sqla_session = db.session

    id = auto_field(dump_only=True)
    username = auto_field()
    balance = auto_field(dump_only=True)
    free_spins = auto_field(dump_only=True)
    multiplier = auto_field(dump_only=True)
    modified_at = auto_field(dump_only=True)

    can_play = fields.Method("get_can_play", dump_only=True)

    def get_can_play(self, obj):
        return can_play(obj)

class SpinRecordSchema(SQLAlchemyAutoSchema):
    class Meta:
        model = SpinRecord
        include_fk = True
        load_instance = True
        sqla_session = db.session

    id = auto_field(dump_only=True)
    account_id = auto_field(dump_only=True)
    spin_time = auto_field(dump_only=True)
    drawn_symbols = fields.List(fields.String(), dump_only=True)
    spin_result = fields.String(dump_only=True)

class SymbolSchema(SQLAlchemyAutoSchema):
    class Meta:
        model = Symbol
        load_instance = True
        sqla_session = db.session

    id = auto_field(dump_only=True)

class SymbolProbabilitySchema(Schema):
    symbol = fields.Nested(SymbolSchema)
    probability = fields.Float()

class SymbolStatisticsSchema(Schema):
    total_weight = fields.Int()
    symbol_count = fields.Int()
    symbols = fields.List(fields.Nested(SymbolProbabilitySchema))

# --- Request Schemas ---

class CreateAccountSchema(Schema):
    username = fields.Str(
        required=True,
        validate=[
            Length(min=1, max=50, error="Username must be between 1 and 50 characters."),
            Regexp(r'^\S(.*\S)?$', error="Username cannot start or end with whitespace.")
        ]
    )

    @pre_load
    def strip_username(self, data, **kwargs):
        if isinstance(data, dict) and isinstance(data.get('username'), str):
            data = dict(data)
            data['username'] = data['username'].strip()
        return data

class SpinRequestSchema(Schema):
    bet_amount = fields.Decimal(
        load_default=Decimal('1.0'),
        validate=[validate_amount, validate_two_decimal_places]
    )

class AddCashSchema(Schema):
    amount = fields.Decimal(required=True, validate=[validate_amount, validate_two_decimal_places])

class AddFreeSpinsSchema(Schema):
    count = fields.Int(load_default=None, validate=Range(min=0, max=1000000, error="Count must be between 0 and 1,000,000."))

class UpdateSymbolSchema(Schema):
    value = fields.Decimal(required=True, validate=Range(min=0, max=MAX_AMOUNT, error="Value must be between 0 and 1,000,000."))
    weight = fields.Int(required=True, validate=Range(min=0, max=1000000, error="Weight must be between 0 and 1,000,000."))

    @validates('value')
    def validate_value_places(self, value, **kwargs):
        validate_two_decimal_places(value)

class HistoryQuerySchema(Schema):
    limit = fields.Int(load_default=None, validate=Range(min=1, max=500, error="Limit must be between 1 and 500."))
