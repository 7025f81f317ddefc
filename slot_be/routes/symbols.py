from flask import Blueprint, request, jsonify

from slot_be.schemas import SymbolSchema, SymbolStatisticsSchema, UpdateSymbolSchema
from slot_be.services import symbol_service

symbols_bp = Blueprint('symbols', __name__, url_prefix='/api/symbols')

@symbols_bp.route('', methods=['GET'])
@symbols_bp.route('/', methods=['GET']) # Avoid 308 redirects for clients using a trailing slash
def list_symbols():
    symbols = symbol_service.list_symbols()
    return jsonify({'status': True, 'symbols': SymbolSchema(many=True).dump(symbols)}), 200

@symbols_bp.route('/statistics', methods=['GET'])
def symbol_statistics():
    stats = symbol_service.symbol_statistics()
    return jsonify({'status': True, 'statistics': SymbolStatisticsSchema().dump(stats)}), 200

@symbols_bp.route('/<int:symbol_id>', methods=['GET'])
def get_symbol(symbol_id):
    symbol = symbol_service.get_symbol(symbol_id)
    return jsonify({'status': True, 'symbol': SymbolSchema().dump(symbol)}), 200

@symbols_bp.route('/<int:symbol_id>', methods=['PUT'])
def update_symbol(symbol_id):
    data = UpdateSymbolSchema().load(request.get_json(silent=True) or {})
    symbol = symbol_service.update_symbol(symbol_id, data['value'], data['weight'])
    return jsonify({'status': True, 'symbol': SymbolSchema().dump(symbol)}), 200

@symbols_bp.route('/reset-to-defaults', methods=['POST'])
def reset_to_defaults():
    symbols = symbol_service.reset_to_defaults()
    return jsonify({
        'status': True,
        'status_message': 'Symbols reset to default values',
        'symbols': SymbolSchema(many=True).dump(symbols)
    }), 200
