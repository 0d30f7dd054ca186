"""Tests for the management commands."""

from io import StringIO

import pytest
from django.core.management import call_command
from django.core.management.base import CommandError
from eth_account import Account

from tokenlend.apps.authority.models import Authority
from tokenlend.apps.loans.models import Loan
from tokenlend.apps.tokens.models import Token
from tokenlend.constants import MAXIMUM_WEI_FOR_AUTHORITY

pytestmark = pytest.mark.django_db


def run(*args, **options) -> str:
    out = StringIO()
    call_command(*args, stdout=out, **options)
    return out.getvalue()


class TestGenerateKeypair:
    def test_prints_usable_secret(self):
        output = run("generate_keypair")

        secret = output.splitlines()[1]
        address = Account.from_key(secret).address
        assert f"Address: {address}" in output


class TestSetupAuthority:
    def test_persists_and_funds(self, wired_services, ledger):
        output = run("setup_authority")

        assert Authority.objects.filter(public_key=wired_services.authority.address).exists()
        assert ledger.get_balance(wired_services.authority.address) == MAXIMUM_WEI_FOR_AUTHORITY
        assert "Authority setup complete!" in output

    def test_already_funded(self, wired_services, ledger):
        ledger.native[wired_services.authority.address.lower()] = MAXIMUM_WEI_FOR_AUTHORITY
        output = run("setup_authority")
        assert "no funding needed" in output


class TestSetupToken:
    def test_defaults(self, wired_services, ledger):
        output = run("setup_token")

        token = Token.objects.get()
        assert token.name == "StreamflowX"
        assert token.decimals == 9
        assert ledger.get_mint(token.address).supply == 100_000_000 * 10**9
        assert token.address in output

    def test_custom_arguments(self, wired_services, ledger):
        run("setup_token", "--name", "Tiny", "--decimals", "2", "--supply", "12.5")

        token = Token.objects.get()
        assert (token.name, token.decimals) == ("Tiny", 2)
        assert ledger.get_mint(token.address).supply == 1250

    def test_rejected_decimals(self, wired_services):
        with pytest.raises(CommandError, match="Invalid token decimals"):
            run("setup_token", "--decimals", "19")


class TestMintToken:
    def test_mints_whole_tokens(self, wired_services, ledger, token):
        run("mint_token", token.token_address, "5")
        assert ledger.get_mint(token.token_address).supply == 1005 * 10**9

    def test_unknown_token(self, wired_services, user_address):
        with pytest.raises(CommandError, match="Invalid token mint/address"):
            run("mint_token", user_address, "5")


class TestDisburseLoan:
    def test_by_address(self, wired_services, token, user_address):
        output = run("disburse_loan", token.token_address, "10", "--user", user_address)

        loan = Loan.objects.get()
        assert loan.user.wallet_address == user_address
        assert loan.amount == 10 * 10**9
        assert f"Loan {loan.id} disbursed" in output

    def test_by_user_secret_env(self, wired_services, token, monkeypatch):
        account = Account.create()
        monkeypatch.setenv("USER_SECRET", account.key.hex())

        run("disburse_loan", token.token_address, "1")

        assert Loan.objects.get().user.wallet_address == account.address

    def test_requires_user(self, wired_services, token, monkeypatch):
        monkeypatch.delenv("USER_SECRET", raising=False)
        with pytest.raises(CommandError, match="Provide --user"):
            run("disburse_loan", token.token_address, "1")

    def test_business_error(self, wired_services, token, user_address):
        with pytest.raises(CommandError, match="exhausted the maximum loanable amount"):
            run("disburse_loan", token.token_address, "500", "--user", user_address)


class TestTruncateLoans:
    def test_requires_confirmation(self, wired_services):
        with pytest.raises(CommandError, match="--yes"):
            run("truncate_loans")

    def test_deletes_loans(self, wired_services, token, user_address):
        wired_services.loans.disburse_loan(user_address, token.token_address, 1)

        output = run("truncate_loans", "--yes")

        assert Loan.objects.count() == 0
        assert "Deleted 1 txs, 1 loans, 1 users." in output
