"""Coin ledger for paid actions.

Usage:
    soft_deduct(ledger, user_id, 20, "Skill Assessment")

Deduction is best-effort: monetization never gates assessment generation.
Insufficient balance is demo mode: a warning is logged, nothing is debited
and the unchanged balance is returned. Any other ledger error is logged by
soft_deduct and the caller proceeds (fail-open).
"""

import logging
from datetime import datetime, timezone
from typing import Optional

logger = logging.getLogger("talentgate.ledger")

DEFAULT_STARTING_COINS = 50


def _warn_insufficient(user_id: str, balance: int, amount: int) -> None:
    logger.warning(
        "[ECONOMY] Insufficient coins for %s (%d/%d). Proceeding in demo mode.",
        user_id, balance, amount,
    )


class LedgerService:
    def deduct(self, user_id: str, amount: int, reason: str) -> int:
        """Debit ``amount`` coins and return the resulting balance.

        With too few coins nothing is debited and the current balance is
        returned.
        """
        raise NotImplementedError


class InMemoryLedger(LedgerService):
    def __init__(self, balances: Optional[dict[str, int]] = None):
        self.balances = dict(balances or {})
        self.history: list[dict] = []

    def deduct(self, user_id: str, amount: int, reason: str) -> int:
        balance = self.balances.get(user_id, DEFAULT_STARTING_COINS)
        if balance < amount:
            _warn_insufficient(user_id, balance, amount)
            return balance
        self.balances[user_id] = balance - amount
        self.history.append({"user_id": user_id, "amount": amount, "type": "DEBIT", "reason": reason})
        return self.balances[user_id]


class SupabaseLedger(LedgerService):
    def __init__(self, supabase_client):
        self.sb = supabase_client

    def deduct(self, user_id: str, amount: int, reason: str) -> int:
        result = self.sb.table("users") \
            .select("uid, coins") \
            .eq("uid", user_id) \
            .limit(1) \
            .execute()
        if not result.data:
            raise LookupError(f"User not found for coin deduction: {user_id}")

        row = result.data[0]
        balance = row.get("coins")
        if balance is None:
            balance = DEFAULT_STARTING_COINS
        if balance < amount:
            _warn_insufficient(user_id, balance, amount)
            return balance

        new_balance = balance - amount
        self.sb.table("users") \
            .update({"coins": new_balance}) \
            .eq("uid", user_id) \
            .execute()
        self.sb.table("coin_history") \
            .insert({
                "user_id": user_id,
                "amount": amount,
                "type": "DEBIT",
                "reason": reason,
                "created_at": datetime.now(timezone.utc).isoformat(),
            }) \
            .execute()
        return new_balance


def soft_deduct(ledger: LedgerService, user_id: str, amount: int, reason: str) -> Optional[int]:
    """Deduct coins without ever raising. Returns the balance, or None on error."""
    try:
        balance = ledger.deduct(user_id, amount, reason)
        logger.info("[ECONOMY] %s: %d coins requested from %s (balance=%s)", reason, amount, user_id, balance)
        return balance
    except Exception as exc:
        logger.warning("[ECONOMY] Soft-fail deducting coins for %s: %s", user_id, exc)
        return None
