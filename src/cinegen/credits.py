"""Credit ledger and its persistent store."""

import logging
from pathlib import Path
from typing import Optional

import yaml

from .config import config
from .models import CreditState, UNLIMITED_BALANCE

logger = logging.getLogger(__name__)

# Price table
SCRIPT_COST_PER_SCENE = 5
IMAGE_COST = 10
SMART_PASTE_COST = 50

CREDITS_KEY = "cinegen_credits"
INFINITE_KEY = "cinegen_infinite"


def script_cost(scene_count: int) -> int:
    """Credit price of generating a script for ``scene_count`` scenes."""
    return scene_count * SCRIPT_COST_PER_SCENE


class CreditStore:
    """YAML-backed key-value store holding the balance and unlimited flag."""

    def __init__(self, path: Optional[Path] = None) -> None:
        self._path = Path(path) if path else config.credit_file

    @property
    def path(self) -> Path:
        return self._path

    def _read(self) -> dict:
        if not self._path.exists():
            return {}
        with open(self._path, "r") as f:
            data = yaml.safe_load(f)
        return data if isinstance(data, dict) else {}

    def _write(self, data: dict) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        with open(self._path, "w") as f:
            yaml.safe_dump(data, f, default_flow_style=False)

    def load_balance(self) -> Optional[int]:
        value = self._read().get(CREDITS_KEY)
        return None if value is None else int(value)

    def load_infinite(self) -> bool:
        return bool(self._read().get(INFINITE_KEY, False))

    def save_balance(self, remaining: int) -> None:
        data = self._read()
        data[CREDITS_KEY] = remaining
        self._write(data)

    def save_infinite(self, flag: bool) -> None:
        data = self._read()
        data[INFINITE_KEY] = flag
        self._write(data)


class CreditLedger:
    """Scalar credit budget with saturating debits.

    The ledger does not re-validate affordability on debit; callers gate
    paid actions with :meth:`can_afford` first. A debit larger than the
    balance lands on zero.
    """

    def __init__(self, store: CreditStore, state: CreditState) -> None:
        self._store = store
        self._state = state

    @classmethod
    def load(cls, store: Optional[CreditStore] = None) -> "CreditLedger":
        """Initialize the ledger from the persistent store.

        An unset balance is seeded with the configured starting credits.
        """
        store = store or CreditStore()
        if store.load_infinite():
            state = CreditState(remaining=UNLIMITED_BALANCE, is_infinite=True)
        else:
            balance = store.load_balance()
            if balance is None:
                balance = config.initial_credits
                store.save_balance(balance)
            state = CreditState(remaining=max(0, balance), is_infinite=False)

        logger.debug(f"Loaded credits: {state.remaining} (infinite={state.is_infinite})")
        return cls(store, state)

    @property
    def state(self) -> CreditState:
        return self._state

    @property
    def remaining(self) -> int:
        return self._state.remaining

    @property
    def is_infinite(self) -> bool:
        return self._state.is_infinite

    @property
    def store(self) -> CreditStore:
        return self._store

    def can_afford(self, amount: int) -> bool:
        return self._state.can_afford(amount)

    def debit(self, amount: int) -> CreditState:
        """Subtract ``amount`` credits, saturating at zero.

        Args:
            amount: Non-negative number of credits to consume.

        Returns:
            The updated credit state (unchanged in unlimited mode).
        """
        if amount < 0:
            raise ValueError(f"Debit amount must be non-negative, got {amount}")
        if self._state.is_infinite:
            return self._state

        remaining = max(0, self._state.remaining - amount)
        self._store.save_balance(remaining)
        self._state = CreditState(remaining=remaining, is_infinite=False)
        logger.info(f"Debited {amount} credits ({remaining} remaining)")
        return self._state

    def set_infinite(self) -> CreditState:
        self._state = CreditState(remaining=UNLIMITED_BALANCE, is_infinite=True)
        self._store.save_infinite(True)
        logger.info("Credit ledger switched to unlimited mode")
        return self._state

    def set_finite(self, amount: int) -> CreditState:
        if amount < 0:
            raise ValueError(f"Credit balance must be non-negative, got {amount}")
        self._state = CreditState(remaining=amount, is_infinite=False)
        self._store.save_infinite(False)
        self._store.save_balance(amount)
        logger.info(f"Credit ledger set to {amount} credits")
        return self._state
