from flask import Blueprint, request, jsonify, current_app

from slot_be.schemas import AccountSchema, CreateAccountSchema, AddCashSchema, AddFreeSpinsSchema
from slot_be.services import account_service
from slot_be.exceptions import AccountNotFoundException

users_bp = Blueprint('users', __name__, url_prefix='/api/users')

@users_bp.route('', methods=['POST'])
def create_user():
    """Registers a username, or returns the existing account for it."""
    data = CreateAccountSchema().load(request.get_json(silent=True) or {})
    account = account_service.create_or_get_account(data['username'])
    return jsonify({'status': True, 'user': AccountSchema().dump(account)}), 200

@users_bp.route('', methods=['GET'])
def list_users():
    accounts = account_service.list_accounts()
    return jsonify({'status': True, 'users': AccountSchema(many=True).dump(accounts)}), 200

@users_bp.route('/id/<int:user_id>', methods=['GET'])
def get_user(user_id):
    account = account_service.get_account(user_id)
    if account is None:
        raise AccountNotFoundException(details={'account_id': user_id})
    return jsonify({'status': True, 'user': AccountSchema().dump(account)}), 200

@users_bp.route('/username/<string:username>', methods=['GET'])
def get_user_by_username(username):
    account = account_service.get_account_by_name(username)
    if account is None:
        raise AccountNotFoundException(details={'username': username})
    return jsonify({'status': True, 'user': AccountSchema().dump(account)}), 200

@users_bp.route('/<int:user_id>/balance', methods=['POST'])
def add_cash(user_id):
    data = AddCashSchema().load(request.get_json(silent=True) or {})
    account = account_service.add_cash(user_id, data['amount'])
    return jsonify({'status': True, 'user': AccountSchema().dump(account)}), 200

@users_bp.route('/<int:user_id>/free-spins', methods=['POST'])
def add_free_spins(user_id):
    data = AddFreeSpinsSchema().load(request.get_json(silent=True) or {})
    account = account_service.grant_free_spins(user_id, data['count'])
    return jsonify({'status': True, 'user': AccountSchema().dump(account)}), 200

@users_bp.route('/<int:user_id>/cashout', methods=['POST'])
def cashout(user_id):
    amount = account_service.cashout(user_id)
    current_app.logger.info(f"Account {user_id} cashed out {amount}.")
    return jsonify({'status': True, 'amount': amount}), 200
