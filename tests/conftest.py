"""Pytest configuration and fixtures for tokenlend tests."""

import pytest
from eth_account import Account

from tests.helpers import TOKEN_DECIMALS, TOKEN_SUPPLY
from tests.helpers.fakes import FakeLedger
from tokenlend.apps.authority.services.authority import AuthorityIdentity
from tokenlend.services import build_services

# Modules that resolve the service graph through get_services()
SERVICE_CONSUMERS = [
    "tokenlend.apps.loans.views",
    "tokenlend.apps.authority.management.commands.setup_authority",
    "tokenlend.apps.tokens.management.commands.setup_token",
    "tokenlend.apps.tokens.management.commands.mint_token",
    "tokenlend.apps.loans.management.commands.disburse_loan",
    "tokenlend.apps.loans.management.commands.truncate_loans",
]


@pytest.fixture
def ledger() -> FakeLedger:
    return FakeLedger()


@pytest.fixture
def identity() -> AuthorityIdentity:
    """Authority from the test settings key."""
    return AuthorityIdentity.resolve()


@pytest.fixture
def services(ledger, identity):
    return build_services(ledger, identity)


@pytest.fixture
def wired_services(services, monkeypatch):
    """Route every get_services() caller to the in-memory service graph."""
    for module in SERVICE_CONSUMERS:
        monkeypatch.setattr(f"{module}.get_services", lambda: services)
    return services


@pytest.fixture
def token(db, services):
    """A registered token: 1000 whole tokens, 9 decimals, all held by the authority."""
    return services.tokens.setup_token(
        decimals=TOKEN_DECIMALS,
        name="TestLending-X",
        payer=services.authority.address,
        supply=TOKEN_SUPPLY,
    )


@pytest.fixture
def user_address() -> str:
    return Account.create().address
