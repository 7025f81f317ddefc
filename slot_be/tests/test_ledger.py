import unittest
from decimal import Decimal

from slot_be.exceptions import ValidationException
from slot_be.services import ledger


class MockAccount:
    def __init__(self, balance="10.00", free_spins=0, multiplier=1):
        self.id = 1
        self.balance = Decimal(balance)
        self.free_spins = free_spins
        self.multiplier = multiplier


class TestCanPlay(unittest.TestCase):

    def test_balance_times_multiplier_at_threshold_is_eligible(self):
        self.assertTrue(ledger.can_play(MockAccount(balance="0.5", multiplier=2)))

    def test_balance_times_multiplier_below_threshold_is_not_eligible(self):
        self.assertFalse(ledger.can_play(MockAccount(balance="0.4", multiplier=2)))

    def test_free_spins_make_empty_account_eligible(self):
        self.assertTrue(ledger.can_play(MockAccount(balance="0", free_spins=1)))

    def test_empty_account_without_free_spins_is_not_eligible(self):
        self.assertFalse(ledger.can_play(MockAccount(balance="0")))

    def test_bet_amount_does_not_affect_eligibility(self):
        account = MockAccount(balance="1.00")
        self.assertTrue(ledger.can_play(account, Decimal("500")))
        self.assertTrue(ledger.can_play(account, Decimal("0.01")))


class TestWholeCents(unittest.TestCase):

    def test_amounts_up_to_two_places(self):
        for amount in ('1', '1.5', '0.01', '100.00', '1E+2'):
            self.assertTrue(ledger.is_whole_cents(Decimal(amount)), amount)

    def test_sub_cent_amounts(self):
        for amount in ('0.004', '0.001', '1.005', '1.000'):
            self.assertFalse(ledger.is_whole_cents(Decimal(amount)), amount)


class TestLedgerMutations(unittest.TestCase):

    def test_consume_for_spin_uses_a_free_spin(self):
        account = MockAccount(free_spins=2)
        self.assertTrue(ledger.consume_for_spin(account))
        self.assertEqual(account.free_spins, 1)

    def test_consume_for_spin_without_free_spins(self):
        account = MockAccount(free_spins=0)
        self.assertFalse(ledger.consume_for_spin(account))
        self.assertEqual(account.free_spins, 0)
        self.assertEqual(account.balance, Decimal("10.00"))

    def test_debit_bet(self):
        account = MockAccount(balance="10.00")
        ledger.debit_bet(account, Decimal("2.50"))
        self.assertEqual(account.balance, Decimal("7.50"))

    def test_apply_win_of_zero_leaves_balance(self):
        account = MockAccount(balance="3.00")
        ledger.apply_win(account, Decimal("0"))
        self.assertEqual(account.balance, Decimal("3.00"))

    def test_apply_win(self):
        account = MockAccount(balance="3.00")
        ledger.apply_win(account, Decimal("8.00"))
        self.assertEqual(account.balance, Decimal("11.00"))

    def test_grant_free_spins_defaults_to_ten(self):
        account = MockAccount()
        ledger.grant_free_spins(account)
        self.assertEqual(account.free_spins, 10)

    def test_grant_free_spins_with_count(self):
        account = MockAccount(free_spins=3)
        ledger.grant_free_spins(account, 5)
        self.assertEqual(account.free_spins, 8)

    def test_grant_negative_free_spins_is_rejected(self):
        account = MockAccount(free_spins=3)
        with self.assertRaises(ValidationException):
            ledger.grant_free_spins(account, -1)
        self.assertEqual(account.free_spins, 3)

    def test_add_cash_has_no_upper_bound(self):
        account = MockAccount(balance="1.00")
        ledger.add_cash(account, Decimal("999999999.99"))
        self.assertEqual(account.balance, Decimal("1000000000.99"))

    def test_cashout_returns_balance_and_empties_it(self):
        account = MockAccount(balance="12.34")
        self.assertEqual(ledger.cashout(account), Decimal("12.34"))
        self.assertEqual(account.balance, Decimal("0"))

    def test_cashout_of_empty_account_returns_zero(self):
        account = MockAccount(balance="0")
        self.assertEqual(ledger.cashout(account), Decimal("0"))
        self.assertEqual(account.balance, Decimal("0"))


if __name__ == '__main__':
    unittest.main()
