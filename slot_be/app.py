from dotenv import load_dotenv

# Load environment variables from .env file before the config is validated
load_dotenv()

from flask import Flask, request, jsonify, current_app, g
import os
import uuid
import random
import secrets
from flask_migrate import Migrate
from flask_cors import CORS
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.exceptions import HTTPException as WerkzeugHTTPException
from http import HTTPStatus
import logging
from pythonjsonlogger import jsonlogger
from marshmallow import ValidationError
import click

from .exceptions import AppException
from .error_codes import ErrorCodes
from .models import db
from .config import Config
from .services import account_service, symbol_service
from .routes.users import users_bp
from .routes.games import games_bp
from .routes.symbols import symbols_bp

# Resolved against the package, not the working directory
MIGRATIONS_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), 'migrations')

# Custom Logging Filter for Request ID
class RequestIdFilter(logging.Filter):
    def filter(self, record):
        try:
            record.request_id = g.get('request_id', 'N/A')
        except RuntimeError:
            # Log emitted outside an application context (CLI, startup)
            record.request_id = 'N/A'
        return True

def _error_response(error_code, status_message, status_code, details=None):
    return jsonify({
        'request_id': g.get('request_id', 'N/A'),
        'status': False,
        'error_code': error_code,
        'status_message': status_message,
        'details': details or {}
    }), status_code

def _build_spin_rng(seed):
    """Seeded generator for reproducible runs, otherwise the OS entropy source."""
    if seed is not None:
        return random.Random(seed)
    return secrets.SystemRandom()

def create_app(config_class=Config):
    """Application factory pattern."""
    app = Flask(__name__)
    app.config.from_object(config_class)

    # --- CORS Setup ---
    allowed_origins = []
    if app.debug:
        allowed_origins.extend([
            "http://localhost:5173",
            "http://127.0.0.1:5173"
        ])
    allowed_origins.extend(app.config.get('CORS_ORIGINS_LIST') or [])

    if allowed_origins:
        CORS(app,
             origins=allowed_origins,
             methods=['GET', 'POST', 'PUT', 'OPTIONS'],
             allow_headers=['Content-Type'],
             max_age=86400)
        app.logger.info(f"CORS configured for origins: {allowed_origins}")
    else:
        app.logger.warning("No CORS origins configured - API will reject cross-origin requests")

    # --- Logging Configuration ---
    if not app.debug:
        logger = app.logger
        handler = logging.StreamHandler()
        formatter = jsonlogger.JsonFormatter(
            '%(asctime)s %(levelname)s %(request_id)s %(module)s %(funcName)s %(lineno)d %(message)s'
        )
        handler.setFormatter(formatter)
        handler.addFilter(RequestIdFilter())
        if logger.hasHandlers():
            logger.handlers.clear()
        logger.addHandler(handler)
        logger.setLevel(logging.INFO)
    else:
        if not app.logger.handlers:
            logging.basicConfig(level=logging.DEBUG)

    # --- Request ID Middleware ---
    @app.before_request
    def assign_request_id():
        g.request_id = request.headers.get('X-Request-ID') or str(uuid.uuid4())

    @app.after_request
    def add_request_id_header(response):
        response.headers['X-Request-ID'] = g.get('request_id', 'N/A')
        response.headers['X-Content-Type-Options'] = 'nosniff'
        return response

    # --- Database Setup ---
    db.init_app(app)
    Migrate(app, db, directory=MIGRATIONS_DIR)

    # --- Spin random source ---
    app.extensions['spin_rng'] = _build_spin_rng(app.config.get('SPIN_RNG_SEED'))

    if app.config.get('SEED_SYMBOLS_ON_STARTUP'):
        with app.app_context():
            db.create_all()
            symbol_service.seed_default_symbols()

    # --- Error Handlers ---
    @app.errorhandler(ValidationError)
    def handle_validation_error(e):
        current_app.logger.warning(
            f"Request ID: {g.get('request_id', 'N/A')} - Validation error: {e.messages} - Error Code: {ErrorCodes.VALIDATION_ERROR}"
        )
        return _error_response(ErrorCodes.VALIDATION_ERROR, 'Input validation failed.',
                               HTTPStatus.UNPROCESSABLE_ENTITY, {'errors': e.messages})

    @app.errorhandler(SQLAlchemyError)
    def handle_database_error(e):
        current_app.logger.error(
            f"Request ID: {g.get('request_id', 'N/A')} - Database error. Error Code: {ErrorCodes.INTERNAL_SERVER_ERROR}",
            exc_info=True
        )
        return _error_response(ErrorCodes.INTERNAL_SERVER_ERROR, 'A database error occurred. Please try again later.',
                               HTTPStatus.INTERNAL_SERVER_ERROR)

    @app.errorhandler(AppException)
    def handle_app_exception(e):
        current_app.logger.log(
            logging.ERROR if e.status_code >= 500 else logging.WARNING,
            f"Request ID: {g.get('request_id', 'N/A')} - AppException: {e.error_code} - {e.status_message} - Details: {e.details}",
            exc_info=e.status_code >= 500 # Stack trace for server errors only
        )
        return _error_response(e.error_code, e.status_message, e.status_code, e.details)

    @app.errorhandler(WerkzeugHTTPException)
    def handle_werkzeug_http_exception(e):
        error_code = ErrorCodes.GENERIC_ERROR
        if e.code == 404:
            error_code = ErrorCodes.NOT_FOUND
        elif e.code == 405:
            error_code = ErrorCodes.METHOD_NOT_ALLOWED
        elif e.code >= 500:
            error_code = ErrorCodes.INTERNAL_SERVER_ERROR

        current_app.logger.warning(
            f"Request ID: {g.get('request_id', 'N/A')} - HTTPException: {e.code} - {e.name}: {e.description} - Error Code: {error_code}"
        )
        return _error_response(error_code, e.name, e.code, {'description': e.description})

    @app.errorhandler(Exception)
    def handle_global_exception(e):
        current_app.logger.critical(
            f"Request ID: {g.get('request_id', 'N/A')} - Unhandled Critical Exception. Error Code: {ErrorCodes.INTERNAL_SERVER_ERROR}",
            exc_info=True
        )
        return _error_response(ErrorCodes.INTERNAL_SERVER_ERROR,
                               'An unexpected internal server error occurred. Please try again later.',
                               HTTPStatus.INTERNAL_SERVER_ERROR)

    # Register Blueprints
    app.register_blueprint(users_bp)
    app.register_blueprint(games_bp)
    app.register_blueprint(symbols_bp)

    # --- CLI commands ---
    @app.cli.command('seed-symbols')
    def seed_symbols_command():
        """Creates tables and inserts the default symbols if the table is empty."""
        db.create_all()
        inserted = symbol_service.seed_default_symbols()
        if inserted:
            click.echo(f"Seeded {inserted} default symbols.")
        else:
            click.echo("Symbol table already populated; nothing to do.")

    @app.cli.command('reset-symbols')
    @click.confirmation_option(prompt='Replace the symbol table with the defaults?')
    def reset_symbols_command():
        """Replaces the symbol table with the defaults."""
        symbols = symbol_service.reset_to_defaults()
        click.echo(f"Symbol table reset ({len(symbols)} symbols).")

    @app.cli.command('create-account')
    @click.argument('username')
    @click.option('-b', '--balance', type=str, default=None,
                  help='Cash to add on top of the default starting balance')
    def create_account_command(username, balance):
        """Registers USERNAME (idempotent) and optionally tops up its balance."""
        account = account_service.create_or_get_account(username)
        if balance:
            account = account_service.add_cash(account.id, balance)
        click.echo(f"Account {account.id} '{account.username}': balance {account.balance}, free spins {account.free_spins}")

    return app
