from flask import Blueprint, request, jsonify, current_app

from slot_be.schemas import AccountSchema, SpinRecordSchema, SpinRequestSchema, HistoryQuerySchema
from slot_be.services import account_service, ledger
from slot_be.utils.spin_handler import handle_spin

games_bp = Blueprint('games', __name__, url_prefix='/api/games')

@games_bp.route('/<int:user_id>/spin', methods=['POST'])
def spin(user_id):
    data = SpinRequestSchema().load(request.get_json(silent=True) or {})

    spin_record = handle_spin(user_id, data['bet_amount'], rng=current_app.extensions.get('spin_rng'))
    account = account_service.get_account(user_id)

    return jsonify({
        'status': True,
        'spin': SpinRecordSchema().dump(spin_record),
        'user': AccountSchema().dump(account)
    }), 200

@games_bp.route('/<int:user_id>/history', methods=['GET'])
def history(user_id):
    args = HistoryQuerySchema().load(request.args)
    spins = account_service.get_spin_history(user_id, args['limit'])
    return jsonify({'status': True, 'history': SpinRecordSchema(many=True).dump(spins)}), 200

@games_bp.route('/<int:user_id>/can-play', methods=['GET'])
def can_play(user_id):
    account = account_service.require_account(user_id)
    return jsonify({'status': True, 'can_play': ledger.can_play(account)}), 200
