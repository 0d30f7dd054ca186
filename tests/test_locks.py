"""Unit tests for the per-wallet loan lock."""

import pytest

from tests.helpers.fakes import FakeRedis
from tokenlend.apps.loans.services.locks import LOCK, UserLoanLock
from tokenlend.errors import LoanInProgressError

ADDRESS = "0x70997970C51812dc3A010C7d01b50e0d17dc79C8"
KEY = LOCK.format(address=ADDRESS.lower())


@pytest.fixture(autouse=True)
def no_sleep(monkeypatch):
    monkeypatch.setattr("tokenlend.apps.loans.services.locks.time.sleep", lambda s: None)


class TestUserLoanLock:
    """Tests for UserLoanLock.hold."""

    def test_holds_and_releases(self):
        redis = FakeRedis()
        lock = UserLoanLock(r=redis, ttl=30)

        with lock.hold(ADDRESS):
            assert KEY in redis.store
        assert KEY not in redis.store

    def test_key_ignores_address_case(self):
        redis = FakeRedis()
        lock = UserLoanLock(r=redis, ttl=30)

        with lock.hold(ADDRESS.lower()):
            with pytest.raises(LoanInProgressError):
                with lock.hold(ADDRESS):
                    pass

    def test_retries_before_giving_up(self):
        redis = FakeRedis()
        redis.store[KEY] = "held"
        lock = UserLoanLock(r=redis, ttl=30)

        with pytest.raises(LoanInProgressError, match="in progress"):
            with lock.hold(ADDRESS, retries=2):
                pass
        assert redis.set_calls == 3

    def test_released_on_error(self):
        redis = FakeRedis()
        lock = UserLoanLock(r=redis, ttl=30)

        with pytest.raises(ValueError):
            with lock.hold(ADDRESS):
                raise ValueError("boom")
        assert redis.store == {}

    def test_does_not_release_foreign_token(self):
        redis = FakeRedis()
        lock = UserLoanLock(r=redis, ttl=30)

        with lock.hold(ADDRESS):
            # lock expired and was taken by another request meanwhile
            redis.store[KEY] = "someone-else"
        assert redis.store[KEY] == "someone-else"


class TestLockSettings:
    def test_ttl_outlives_transfer_confirmation(self, settings):
        assert settings.LOAN_LOCK_TTL >= settings.TX_CONFIRM_TIMEOUT

    def test_default_ttl_from_settings(self, settings):
        settings.LOAN_LOCK_TTL = 240
        assert UserLoanLock(r=FakeRedis()).ttl == 240
