"""
Configuration module with fail-fast validation.

Values are read from the environment (and a .env file, loaded by the app
factory) and validated once at import time.
"""
from slot_be.config_validator import validate_production_config

class Config:
    """Application configuration built from validated environment values."""

    _validated_config = validate_production_config()

    # Database Configuration
    SQLALCHEMY_DATABASE_URI = _validated_config['SQLALCHEMY_DATABASE_URI']
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Flask Debug Mode
    DEBUG = _validated_config['DEBUG']

    # CORS Configuration
    CORS_ORIGINS_LIST = _validated_config['CORS_ORIGINS']

    # Slot game settings
    BONUS_SYMBOL_NAME = _validated_config['BONUS_SYMBOL_NAME']
    DEFAULT_FREE_SPIN_GRANT = _validated_config['DEFAULT_FREE_SPIN_GRANT']
    SPIN_HISTORY_LIMIT = _validated_config['SPIN_HISTORY_LIMIT']
    SPIN_RNG_SEED = _validated_config['SPIN_RNG_SEED']
    SEED_SYMBOLS_ON_STARTUP = _validated_config['SEED_SYMBOLS_ON_STARTUP']


class TestingConfig(Config):
    TESTING = True
    DEBUG = False
    SQLALCHEMY_DATABASE_URI = 'sqlite://' # In-memory; Flask-SQLAlchemy pins it to a single connection
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    CORS_ORIGINS_LIST = []
    SPIN_RNG_SEED = None
    # Tests seed the symbol table explicitly
    SEED_SYMBOLS_ON_STARTUP = False
