"""Login modes.

Access is a stub: any token of five or more characters is accepted. The
mode only decides whether the credit ledger runs unlimited.
"""

import logging
from enum import Enum

from .config import config
from .credits import CreditLedger
from .errors import LoginError
from .models import CreditState

logger = logging.getLogger(__name__)

MIN_TOKEN_LENGTH = 5


class LoginMode(str, Enum):
    """Supported login modes."""
    DEV = "dev"
    KEY = "key"
    RANDOM = "random"


def login(mode: LoginMode, token: str, ledger: CreditLedger) -> CreditState:
    """Enter a login mode and set the ledger accordingly.

    Raises:
        LoginError: If a non-dev token is too short.
    """
    mode = LoginMode(mode)
    if mode != LoginMode.DEV and len(token.strip()) < MIN_TOKEN_LENGTH:
        raise LoginError("Invalid entry. Please check your credentials.")

    if mode == LoginMode.DEV:
        state = ledger.set_infinite()
    else:
        # Keep the stored balance, or start over on first use
        balance = ledger.store.load_balance()
        state = ledger.set_finite(config.initial_credits if balance is None else balance)

    logger.info(f"Logged in with mode '{mode.value}'")
    return state
