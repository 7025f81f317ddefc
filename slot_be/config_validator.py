"""
Configuration validation and startup checks.

This module implements fail-fast validation so that a production deployment
never starts against a development database, with debug mode on, or with a
predictable random source for spins.
"""

import os
import sys
import warnings
from typing import List, Optional


class ConfigValidationError(Exception):
    """Raised when critical configuration is missing or invalid."""
    pass


class ConfigValidator:
    """Validates application configuration and enforces production safety."""

    def __init__(self, is_production: bool = None):
        """
        Initialize the configuration validator.

        Args:
            is_production: If None, auto-detect from FLASK_ENV
        """
        if is_production is None:
            is_production = os.getenv('FLASK_ENV', '').lower() == 'production'

        self.is_production = is_production
        self.is_testing = os.getenv('TESTING', 'False').lower() in ('true', '1', 't')
        self.errors: List[str] = []
        self.warnings: List[str] = []

    def validate_database_config(self) -> str:
        """Validate database configuration."""
        database_url = os.getenv('DATABASE_URL')

        if database_url:
            if not database_url.startswith(('postgresql://', 'postgresql+psycopg2://', 'sqlite://')):
                self.errors.append("CRITICAL: DATABASE_URL must use a supported database driver")
            return database_url

        if self.is_production:
            self.errors.append("CRITICAL: DATABASE_URL must be set in production environment")
            return None

        if not self.is_testing:
            self.warnings.append("DATABASE_URL not set - using development SQLite database slot_machine.db")
        return 'sqlite:///slot_machine.db'

    def validate_cors_config(self) -> List[str]:
        """Validate CORS configuration."""
        cors_origins = os.getenv('CORS_ORIGINS', '')

        if not cors_origins and self.is_production:
            self.errors.append(
                "CRITICAL: CORS_ORIGINS must be set in production to specify allowed frontend domains"
            )
            return []

        if cors_origins:
            origins = [origin.strip() for origin in cors_origins.split(',') if origin.strip()]
            for origin in origins:
                if not origin.startswith(('http://', 'https://')):
                    self.warnings.append(f"CORS origin '{origin}' should include protocol (http:// or https://)")
            return origins

        return []

    def validate_game_config(self) -> dict:
        """Validate slot game settings."""
        game = {
            'BONUS_SYMBOL_NAME': os.getenv('BONUS_SYMBOL_NAME', 'Bonus').strip(),
            'SPIN_RNG_SEED': None,
        }
        if not game['BONUS_SYMBOL_NAME']:
            self.errors.append("CRITICAL: BONUS_SYMBOL_NAME must not be empty")

        for var_name, default in (('DEFAULT_FREE_SPIN_GRANT', 10), ('SPIN_HISTORY_LIMIT', 20)):
            raw = os.getenv(var_name, str(default))
            try:
                value = int(raw)
            except ValueError:
                raise ConfigValidationError(f"{var_name} must be an integer, got '{raw}'")
            if value < 0:
                self.errors.append(f"CRITICAL: {var_name} must not be negative")
            game[var_name] = value

        seed = self._optional_int('SPIN_RNG_SEED')
        if seed is not None:
            if self.is_production:
                self.errors.append("CRITICAL: SPIN_RNG_SEED must not be set in production - spins would be predictable")
            else:
                self.warnings.append(f"SPIN_RNG_SEED={seed} - spin outcomes are reproducible")
            game['SPIN_RNG_SEED'] = seed

        game['SEED_SYMBOLS_ON_STARTUP'] = os.getenv('SEED_SYMBOLS_ON_STARTUP', 'True').lower() in ('true', '1', 't')
        if game['SEED_SYMBOLS_ON_STARTUP'] and self.is_production:
            self.warnings.append(
                "SEED_SYMBOLS_ON_STARTUP creates tables outside migrations - "
                "set it to False in production and run 'flask db upgrade'"
            )
        return game

    @staticmethod
    def _optional_int(var_name: str) -> Optional[int]:
        raw = os.getenv(var_name)
        if raw is None or raw == '':
            return None
        try:
            return int(raw)
        except ValueError:
            raise ConfigValidationError(f"{var_name} must be an integer, got '{raw}'")

    def validate_all(self) -> dict:
        """
        Validate all configuration settings.

        Returns:
            Dictionary containing validated configuration values

        Raises:
            ConfigValidationError: If critical configuration is missing in production
        """
        config = {}

        try:
            config['SQLALCHEMY_DATABASE_URI'] = self.validate_database_config()
            config['CORS_ORIGINS'] = self.validate_cors_config()
            config.update(self.validate_game_config())

            config['DEBUG'] = os.getenv('FLASK_DEBUG', 'False').lower() in ('true', '1', 't')

            if self.is_production and config['DEBUG']:
                self.errors.append("CRITICAL: DEBUG mode must be disabled in production (set FLASK_DEBUG=False)")

            if self.errors:
                error_msg = "Configuration validation failed:\n" + "\n".join(f"  - {error}" for error in self.errors)
                if self.warnings:
                    error_msg += "\n\nWarnings:\n" + "\n".join(f"  - {warning}" for warning in self.warnings)
                raise ConfigValidationError(error_msg)

            for warning in self.warnings:
                warnings.warn(warning, UserWarning)

            return config

        except Exception as e:
            if isinstance(e, ConfigValidationError):
                raise
            else:
                raise ConfigValidationError(f"Configuration validation error: {str(e)}") from e


def validate_production_config() -> dict:
    """
    Validate configuration with fail-fast behavior.

    Returns:
        Dictionary of validated configuration values

    Raises:
        SystemExit: If validation fails during startup
    """
    try:
        validator = ConfigValidator()
        return validator.validate_all()
    except ConfigValidationError as e:
        print("\nCONFIGURATION VALIDATION FAILED\n", file=sys.stderr)
        print(str(e), file=sys.stderr)
        print("\nSet the required environment variables (see .env.example) and restart.", file=sys.stderr)
        print("\nApplication startup ABORTED\n", file=sys.stderr)
        sys.exit(1)
