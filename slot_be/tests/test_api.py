import unittest

from sqlalchemy import delete

from slot_be.models import db, Symbol
from slot_be.error_codes import ErrorCodes
from slot_be.tests.base_case import BaseTestCase, SequenceRng, NINE, TEN, JACK, ACE, BONUS


class TestUserEndpoints(BaseTestCase):

    def _register(self, username='alice'):
        response = self.client.post('/api/users', json={'username': username})
        self.assertEqual(response.status_code, 200, response.get_json())
        return response.get_json()['user']

    def test_register_user(self):
        user = self._register()
        self.assertEqual(user['username'], 'alice')
        self.assertEqual(user['balance'], '10.00')
        self.assertEqual(user['free_spins'], 0)
        self.assertEqual(user['multiplier'], 1)
        self.assertTrue(user['can_play'])
        self.assertIn('modified_at', user)

    def test_register_is_idempotent(self):
        first = self._register()
        second = self._register()
        self.assertEqual(first['id'], second['id'])

        response = self.client.get('/api/users')
        self.assertEqual(len(response.get_json()['users']), 1)

    def test_register_requires_username(self):
        response = self.client.post('/api/users', json={})
        self.assertEqual(response.status_code, 422)
        data = response.get_json()
        self.assertFalse(data['status'])
        self.assertEqual(data['error_code'], ErrorCodes.VALIDATION_ERROR)
        self.assertIn('username', data['details']['errors'])

    def test_register_rejects_blank_and_long_names(self):
        for username in ('   ', 'x' * 51):
            response = self.client.post('/api/users', json={'username': username})
            self.assertEqual(response.status_code, 422, username)

    def test_get_user_by_id_and_name(self):
        user = self._register('bob')

        by_id = self.client.get(f"/api/users/id/{user['id']}")
        by_name = self.client.get('/api/users/username/bob')

        self.assertEqual(by_id.status_code, 200)
        self.assertEqual(by_name.get_json()['user']['id'], user['id'])

    def test_unknown_user_is_404(self):
        response = self.client.get('/api/users/id/9999')
        self.assertEqual(response.status_code, 404)
        data = response.get_json()
        self.assertEqual(data['error_code'], ErrorCodes.ACCOUNT_NOT_FOUND)
        self.assertEqual(data['status_message'], 'User not found')
        self.assertIn('request_id', data)

        response = self.client.get('/api/users/username/ghost')
        self.assertEqual(response.status_code, 404)

    def test_add_cash(self):
        user = self._register()
        response = self.client.post(f"/api/users/{user['id']}/balance", json={'amount': '5.25'})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.get_json()['user']['balance'], '15.25')

    def test_add_cash_validation(self):
        user = self._register()
        for payload in ({}, {'amount': '-1'}, {'amount': '0'}, {'amount': '1.234'}, {'amount': 'abc'}):
            response = self.client.post(f"/api/users/{user['id']}/balance", json=payload)
            self.assertEqual(response.status_code, 422, payload)

    def test_add_cash_unknown_user(self):
        response = self.client.post('/api/users/9999/balance', json={'amount': '1.00'})
        self.assertEqual(response.status_code, 404)

    def test_grant_free_spins_default_and_explicit(self):
        user = self._register()

        response = self.client.post(f"/api/users/{user['id']}/free-spins", json={})
        self.assertEqual(response.get_json()['user']['free_spins'], 10)

        response = self.client.post(f"/api/users/{user['id']}/free-spins", json={'count': 3})
        self.assertEqual(response.get_json()['user']['free_spins'], 13)

    def test_grant_negative_free_spins_is_rejected(self):
        user = self._register()
        response = self.client.post(f"/api/users/{user['id']}/free-spins", json={'count': -1})
        self.assertEqual(response.status_code, 422)

    def test_cashout(self):
        user = self._register()

        response = self.client.post(f"/api/users/{user['id']}/cashout")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.get_json()['amount'], '10.00')

        response = self.client.post(f"/api/users/{user['id']}/cashout")
        self.assertEqual(response.get_json()['amount'], '0.00')

        user = self.client.get(f"/api/users/id/{user['id']}").get_json()['user']
        self.assertEqual(user['balance'], '0.00')
        self.assertFalse(user['can_play'])


class TestGameEndpoints(BaseTestCase):

    def setUp(self):
        super().setUp()
        self.account = self._create_account(balance='10.00')

    def _use_draws(self, *values):
        self.app.extensions['spin_rng'] = SequenceRng(values)

    def test_spin_win(self):
        self._use_draws(ACE, ACE, ACE)

        response = self.client.post(f"/api/games/{self.account.id}/spin", json={'bet_amount': '1.00'})

        self.assertEqual(response.status_code, 200)
        data = response.get_json()
        self.assertTrue(data['status'])
        self.assertEqual(data['spin']['drawn_symbols'], ['Ace', 'Ace', 'Ace'])
        self.assertEqual(data['spin']['spin_result'], 'Ace,Ace,Ace')
        self.assertTrue(data['spin']['is_win'])
        self.assertEqual(data['spin']['win_amount'], '8.00')
        self.assertEqual(data['user']['balance'], '17.00')

    def test_spin_uses_default_bet(self):
        self._use_draws(NINE, TEN, JACK)

        response = self.client.post(f"/api/games/{self.account.id}/spin")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.get_json()['user']['balance'], '9.00')

    def test_spin_with_bonus(self):
        self._use_draws(BONUS, BONUS, NINE)

        response = self.client.post(f"/api/games/{self.account.id}/spin", json={})

        user = response.get_json()['user']
        self.assertEqual(user['free_spins'], 10)
        self.assertEqual(user['balance'], '9.00')

    def test_spin_not_allowed(self):
        broke = self._create_account(username='broke', balance='0.50')

        response = self.client.post(f"/api/games/{broke.id}/spin", json={})

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.get_json()['error_code'], ErrorCodes.PLAY_NOT_ALLOWED)

    def test_spin_unknown_user(self):
        response = self.client.post('/api/games/9999/spin', json={})
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.get_json()['error_code'], ErrorCodes.ACCOUNT_NOT_FOUND)

    def test_spin_invalid_bet(self):
        for bet in ('0', '-2', '0.001'):
            response = self.client.post(f"/api/games/{self.account.id}/spin", json={'bet_amount': bet})
            self.assertEqual(response.status_code, 422, bet)

    def test_spin_with_empty_symbol_table(self):
        db.session.execute(delete(Symbol))
        db.session.commit()

        response = self.client.post(f"/api/games/{self.account.id}/spin", json={})

        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.get_json()['error_code'], ErrorCodes.CONFIGURATION_ERROR)

    def test_history(self):
        self._use_draws(NINE, TEN, JACK, ACE, ACE, ACE)
        self.client.post(f"/api/games/{self.account.id}/spin", json={})
        self.client.post(f"/api/games/{self.account.id}/spin", json={})

        response = self.client.get(f"/api/games/{self.account.id}/history")

        history = response.get_json()['history']
        self.assertEqual([h['spin_result'] for h in history], ['Ace,Ace,Ace', 'Nine,Ten,Jack'])
        self.assertEqual(history[0]['account_id'], self.account.id)

        response = self.client.get(f"/api/games/{self.account.id}/history?limit=1")
        self.assertEqual(len(response.get_json()['history']), 1)

    def test_history_invalid_limit(self):
        response = self.client.get(f"/api/games/{self.account.id}/history?limit=0")
        self.assertEqual(response.status_code, 422)

    def test_history_unknown_user(self):
        response = self.client.get('/api/games/9999/history')
        self.assertEqual(response.status_code, 404)

    def test_can_play(self):
        broke = self._create_account(username='broke', balance='0.99')
        free = self._create_account(username='free', balance='0', free_spins=1)

        self.assertTrue(self.client.get(f"/api/games/{self.account.id}/can-play").get_json()['can_play'])
        self.assertFalse(self.client.get(f"/api/games/{broke.id}/can-play").get_json()['can_play'])
        self.assertTrue(self.client.get(f"/api/games/{free.id}/can-play").get_json()['can_play'])
        self.assertEqual(self.client.get('/api/games/9999/can-play').status_code, 404)


class TestSymbolEndpoints(BaseTestCase):

    def test_list_symbols(self):
        for url in ('/api/symbols', '/api/symbols/'):
            response = self.client.get(url)
            self.assertEqual(response.status_code, 200)
            symbols = response.get_json()['symbols']
            self.assertEqual(len(symbols), 8)
            self.assertEqual(symbols[0], {'id': 1, 'name': 'Nine', 'value': '0.25', 'weight': 256})

    def test_get_symbol(self):
        response = self.client.get('/api/symbols/6')
        self.assertEqual(response.get_json()['symbol']['name'], 'Ace')

    def test_get_unknown_symbol(self):
        response = self.client.get('/api/symbols/99')
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.get_json()['error_code'], ErrorCodes.SYMBOL_NOT_FOUND)

    def test_statistics(self):
        response = self.client.get('/api/symbols/statistics')

        stats = response.get_json()['statistics']
        self.assertEqual(stats['total_weight'], 510)
        self.assertEqual(stats['symbol_count'], 8)
        self.assertEqual(stats['symbols'][0]['symbol']['name'], 'Nine')
        self.assertAlmostEqual(stats['symbols'][0]['probability'], 256 / 510)

    def test_update_symbol(self):
        response = self.client.put('/api/symbols/8', json={'value': '250.00', 'weight': 1})

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.get_json()['symbol'], {'id': 8, 'name': 'Jackpot', 'value': '250.00', 'weight': 1})

    def test_update_symbol_validation(self):
        for payload in ({'value': '1.00'}, {'value': '-1', 'weight': 1}, {'value': '1.00', 'weight': -1},
                        {'value': '1.005', 'weight': 1}):
            response = self.client.put('/api/symbols/1', json=payload)
            self.assertEqual(response.status_code, 422, payload)

    def test_update_unknown_symbol(self):
        response = self.client.put('/api/symbols/99', json={'value': '1.00', 'weight': 1})
        self.assertEqual(response.status_code, 404)

    def test_reset_to_defaults(self):
        self.client.put('/api/symbols/1', json={'value': '9.99', 'weight': 9})

        response = self.client.post('/api/symbols/reset-to-defaults')

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.get_json()['symbols'][0]['value'], '0.25')
        self.assertEqual(self.client.get('/api/symbols/1').get_json()['symbol']['weight'], 256)


class TestErrorHandling(BaseTestCase):

    def test_unknown_route(self):
        response = self.client.get('/api/does-not-exist')
        self.assertEqual(response.status_code, 404)
        data = response.get_json()
        self.assertFalse(data['status'])
        self.assertEqual(data['error_code'], ErrorCodes.NOT_FOUND)

    def test_method_not_allowed(self):
        response = self.client.delete('/api/symbols/1')
        self.assertEqual(response.status_code, 405)
        self.assertEqual(response.get_json()['error_code'], ErrorCodes.METHOD_NOT_ALLOWED)

    def test_request_id_is_echoed(self):
        response = self.client.get('/api/symbols', headers={'X-Request-ID': 'abc-123'})
        self.assertEqual(response.headers['X-Request-ID'], 'abc-123')
        self.assertEqual(response.headers['X-Content-Type-Options'], 'nosniff')

    def test_request_id_is_generated(self):
        response = self.client.get('/api/users/id/9999')
        self.assertTrue(response.headers['X-Request-ID'])
        self.assertEqual(response.get_json()['request_id'], response.headers['X-Request-ID'])


if __name__ == '__main__':
    unittest.main()
