import sys
import os
from unittest.mock import MagicMock

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from talentgate.services.ledger import (
    DEFAULT_STARTING_COINS,
    InMemoryLedger,
    SupabaseLedger,
    soft_deduct,
)


def _sb_with_user(row):
    sb = MagicMock()
    chain = sb.table.return_value.select.return_value.eq.return_value.limit.return_value
    chain.execute.return_value = MagicMock(data=[row] if row else [])
    return sb


class TestInMemoryLedger:
    def test_deduct_from_default_balance(self):
        ledger = InMemoryLedger()
        assert ledger.deduct("u1", 20, "Skill Assessment") == DEFAULT_STARTING_COINS - 20
        assert ledger.history == [
            {"user_id": "u1", "amount": 20, "type": "DEBIT", "reason": "Skill Assessment"},
        ]

    def test_insufficient_balance_returns_unchanged(self):
        ledger = InMemoryLedger({"u1": 10})
        assert ledger.deduct("u1", 20, "Skill Assessment") == 10
        assert ledger.balances["u1"] == 10
        assert ledger.history == []


class TestSupabaseLedger:
    def test_deduct_updates_balance_and_history(self):
        sb = _sb_with_user({"uid": "u1", "coins": 100})
        assert SupabaseLedger(sb).deduct("u1", 20, "Skill Assessment") == 80
        sb.table.return_value.update.assert_called_once_with({"coins": 80})
        inserted = sb.table.return_value.insert.call_args[0][0]
        assert inserted["type"] == "DEBIT"
        assert inserted["amount"] == 20

    def test_missing_user(self):
        with pytest.raises(LookupError):
            SupabaseLedger(_sb_with_user(None)).deduct("ghost", 20, "x")

    def test_null_coins_uses_default(self):
        sb = _sb_with_user({"uid": "u1", "coins": None})
        assert SupabaseLedger(sb).deduct("u1", 20, "x") == DEFAULT_STARTING_COINS - 20

    def test_insufficient_returns_unchanged_balance(self):
        sb = _sb_with_user({"uid": "u1", "coins": 5})
        assert SupabaseLedger(sb).deduct("u1", 20, "x") == 5
        sb.table.return_value.update.assert_not_called()
        sb.table.return_value.insert.assert_not_called()


class TestSoftDeduct:
    def test_returns_new_balance(self):
        assert soft_deduct(InMemoryLedger({"u1": 30}), "u1", 20, "x") == 10

    def test_insufficient_returns_unchanged_balance(self):
        assert soft_deduct(InMemoryLedger({"u1": 0}), "u1", 20, "x") == 0

    def test_any_error_is_swallowed(self):
        ledger = MagicMock()
        ledger.deduct.side_effect = ConnectionError("supabase down")
        assert soft_deduct(ledger, "u1", 20, "x") is None

    def test_missing_supabase_user_is_swallowed(self):
        assert soft_deduct(SupabaseLedger(_sb_with_user(None)), "ghost", 20, "x") is None
