from decimal import Decimal
from flask import current_app
from sqlalchemy import select, delete

from slot_be.models import db, Symbol
from slot_be.exceptions import NotFoundException
from slot_be.error_codes import ErrorCodes

# (id, name, value, weight). Each tier is half as frequent as the one before it.
DEFAULT_SYMBOLS = [
    (1, 'Nine', Decimal('0.25'), 256),
    (2, 'Ten', Decimal('0.50'), 128),
    (3, 'Jack', Decimal('1.00'), 64),
    (4, 'Queen', Decimal('2.00'), 32),
    (5, 'King', Decimal('4.00'), 16),
    (6, 'Ace', Decimal('8.00'), 8),
    (7, 'Bonus', Decimal('0.00'), 4),
    (8, 'Jackpot', Decimal('100.00'), 2),
]


def build_default_symbols():
    return [Symbol(id=s_id, name=name, value=value, weight=weight) for s_id, name, value, weight in DEFAULT_SYMBOLS]


def load_symbol_table():
    """Loads the full symbol table in id order. The draw walks symbols in this order."""
    return list(db.session.scalars(select(Symbol).order_by(Symbol.id)))


def list_symbols():
    return load_symbol_table()


def get_symbol(symbol_id):
    symbol = db.session.get(Symbol, symbol_id)
    if symbol is None:
        raise NotFoundException("Symbol not found", error_code=ErrorCodes.SYMBOL_NOT_FOUND,
                                details={'symbol_id': symbol_id})
    return symbol


def update_symbol(symbol_id, value, weight):
    """Administrative edit of a symbol's payout value and reel weight."""
    try:
        symbol = get_symbol(symbol_id)
        old_value, old_weight = symbol.value, symbol.weight
        symbol.value = value
        symbol.weight = weight
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise

    current_app.logger.info(
        f"Symbol {symbol.name} updated: value {old_value} -> {value}, weight {old_weight} -> {weight}"
    )
    return symbol


def symbol_statistics():
    """
    Summarises the symbol table: total weight, symbol count, and each symbol's
    probability of being drawn on a single reel.

    Raises:
        NotFoundException: If the table is empty.
    """
    symbols = load_symbol_table()
    if not symbols:
        raise NotFoundException("No symbols found", error_code=ErrorCodes.SYMBOL_NOT_FOUND)

    total_weight = sum(s.weight for s in symbols)
    return {
        'total_weight': total_weight,
        'symbol_count': len(symbols),
        'symbols': [
            {
                'symbol': s,
                'probability': (s.weight / total_weight) if total_weight > 0 else 0.0,
            }
            for s in symbols
        ],
    }


def reset_to_defaults():
    """Replaces the whole symbol table with the defaults."""
    try:
        db.session.execute(delete(Symbol))
        db.session.add_all(build_default_symbols())
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise
    current_app.logger.warning("Symbol table reset to default values.")
    return load_symbol_table()


def seed_default_symbols():
    """Inserts the default symbols when the table is empty. Returns the number inserted."""
    if db.session.scalar(select(Symbol.id).limit(1)) is not None:
        return 0
    try:
        symbols = build_default_symbols()
        db.session.add_all(symbols)
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise
    current_app.logger.info(f"Seeded {len(symbols)} default symbols.")
    return len(symbols)
