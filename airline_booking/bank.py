"""Closed ledger of prepaid customer balances."""
from __future__ import annotations

import logging
from typing import Dict, Iterable, Iterator, List, Sequence, Tuple

from .models import BankAccount

logger = logging.getLogger(__name__)

SEED_ACCOUNTS: Sequence[Tuple[str, float]] = (
    ("Abebe Bikila", 8500.00),
    ("Abel Tesfaye", 12000.00),
    ("Haile Gebre", 15000.00),
    ("Tirunesh Dibaba", 9000.00),
    ("Abe Kebe", 18000.00),
    ("Meseret Yimer", 7500.00),
    ("Hanan Daye", 6000.00),
    ("Abiy Yosi", 5000.00),
)


class PaymentAuthority:
    """Fixed set of named balances. Accounts are never added or removed at runtime."""

    def __init__(self, accounts: Iterable[Tuple[str, float]] = SEED_ACCOUNTS) -> None:
        self._accounts: Dict[str, BankAccount] = {}
        for name, balance in accounts:
            if balance < 0:
                raise ValueError(f"account {name!r} cannot start with a negative balance")
            self._accounts[name] = BankAccount(name=name, balance=float(balance))

    def has_account(self, name: str) -> bool:
        return name in self._accounts

    def balance_of(self, name: str) -> float:
        account = self._accounts.get(name)
        return account.balance if account else 0.0

    def debit(self, name: str, amount: float) -> bool:
        account = self._accounts.get(name)
        if account is None or amount > account.balance:
            logger.info("Debit of %.2f declined for %r", amount, name)
            return False
        account.balance -= amount
        logger.info("Debited %.2f from %r, balance now %.2f", amount, name, account.balance)
        return True

    def accounts(self) -> List[BankAccount]:
        return list(self._accounts.values())

    def __iter__(self) -> Iterator[BankAccount]:
        return iter(self.accounts())

    def __len__(self) -> int:
        return len(self._accounts)
