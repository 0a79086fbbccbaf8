"""Tests for the login stub."""

import pytest

from cinegen.auth import LoginMode, login
from cinegen.errors import LoginError


def test_dev_mode_is_unlimited(ledger, store):
    state = login(LoginMode.DEV, "", ledger)
    assert state.is_infinite
    assert store.load_infinite() is True


def test_key_mode_restores_balance(ledger, store):
    ledger.debit(40)
    login(LoginMode.DEV, "", ledger)
    state = login(LoginMode.KEY, "abcde", ledger)
    assert not state.is_infinite
    assert state.remaining == 260
    assert store.load_infinite() is False


@pytest.mark.parametrize("token", ["", "abcd", "   ab   "])
def test_short_token_rejected(ledger, token):
    with pytest.raises(LoginError):
        login(LoginMode.RANDOM, token, ledger)
    assert not ledger.is_infinite


def test_accepts_string_mode(ledger):
    assert login("random", "whatever", ledger).remaining == 300
