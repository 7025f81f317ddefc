"""
Audit Logging
Structured log lines for every operation that moves money or spin credits
"""

import json
import logging
from datetime import datetime, timezone
from flask import current_app, g, has_request_context, request


def _request_context_info():
    """Returns (request_id, ip_address), tolerating calls outside a request."""
    try:
        request_id = g.get('request_id', 'N/A')
    except RuntimeError:
        # Outside application context
        return 'N/A', None
    ip_address = request.remote_addr if has_request_context() else None
    return request_id, ip_address


class AuditLogger:
    """Centralized audit event logging"""

    @staticmethod
    def log_financial_event(event_type: str, account_id: int, amount=None,
                            balance_before=None, balance_after=None, details: dict = None):
        """Log balance-changing events"""
        request_id, ip_address = _request_context_info()

        event_data = {
            'event_type': 'financial',
            'sub_type': event_type,
            'account_id': account_id,
            'amount': amount,
            'balance_before': balance_before,
            'balance_after': balance_after,
            'timestamp': datetime.now(timezone.utc).isoformat(),
            'request_id': request_id,
            'ip_address': ip_address,
            'details': details or {}
        }

        current_app.logger.info(f"FINANCIAL_EVENT: {json.dumps(event_data, default=str)}")

    @staticmethod
    def log_game_event(event_type: str, account_id: int, bet_amount=None, win_amount=None,
                       spin_id: int = None, details: dict = None, level: int = logging.INFO):
        """Log spin and free-spin events"""
        request_id, ip_address = _request_context_info()

        event_data = {
            'event_type': 'game',
            'sub_type': event_type,
            'account_id': account_id,
            'bet_amount': bet_amount,
            'win_amount': win_amount,
            'spin_id': spin_id,
            'timestamp': datetime.now(timezone.utc).isoformat(),
            'request_id': request_id,
            'ip_address': ip_address,
            'details': details or {}
        }

        current_app.logger.log(level, f"GAME_EVENT: {json.dumps(event_data, default=str)}")
