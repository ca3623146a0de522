"""Tests for retry, logging and key helpers."""

import asyncio

import pytest
from conftest import PRIVATE_KEY
from eth_account import Account

from mintbot.utils.address_util import eth_account_from_key_material, eth_account_from_mnemonic
from mintbot.utils.common_util import ensure_parent_dir, init_logging
from mintbot.utils.retry import async_retry_call, next_delay, retry, retry_call

TEST_MNEMONIC = "test test test test test test test test test test test junk"


class Flaky:
    def __init__(self, failures, exc=ConnectionError):
        self.failures = failures
        self.exc = exc
        self.calls = 0

    def __call__(self):
        self.calls += 1
        if self.calls <= self.failures:
            raise self.exc("flaky")
        return "ok"


class TestRetry:

    def test_retry_call_recovers(self):
        flaky = Flaky(2)
        assert retry_call(flaky, tries=3, delay=0) == "ok"
        assert flaky.calls == 3

    def test_retry_call_gives_up(self):
        flaky = Flaky(5)
        with pytest.raises(ConnectionError):
            retry_call(flaky, tries=3, delay=0)
        assert flaky.calls == 3

    def test_retry_call_ignores_other_exceptions(self):
        flaky = Flaky(1, exc=KeyError)
        with pytest.raises(KeyError):
            retry_call(flaky, tries=3, delay=0, exceptions=ConnectionError)
        assert flaky.calls == 1

    def test_async_retry_call(self):
        flaky = Flaky(1)

        async def run():
            return flaky()

        assert asyncio.run(async_retry_call(run, tries=2, delay=0)) == "ok"
        assert flaky.calls == 2

    def test_decorator_on_coroutine(self):
        flaky = Flaky(2)

        @retry(exceptions=ConnectionError, tries=3, delay=0)
        async def fetch():
            return flaky()

        assert asyncio.iscoroutinefunction(fetch)
        assert asyncio.run(fetch()) == "ok"

    def test_decorator_on_function(self):
        flaky = Flaky(1)

        @retry(tries=2)
        def fetch():
            return flaky()

        assert fetch() == "ok"
        assert fetch.__name__ == "fetch"

    def test_next_delay(self):
        assert next_delay(15, backoff=2) == 30
        assert next_delay(200, backoff=2, max_delay=300) == 300
        assert next_delay(15) == 15
        assert 16 <= next_delay(15, jitter=(1, 2)) <= 17


class TestAddressUtil:

    def test_key_without_prefix(self):
        account = eth_account_from_key_material(PRIVATE_KEY[2:])
        assert account.address == Account.from_key(PRIVATE_KEY).address

    def test_mnemonic(self):
        info = eth_account_from_mnemonic(TEST_MNEMONIC)
        assert info["address"] == "0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266"
        account = eth_account_from_key_material(mnemonic=TEST_MNEMONIC)
        assert account.address == info["address"]

    def test_private_key_wins_over_mnemonic(self):
        account = eth_account_from_key_material(PRIVATE_KEY, TEST_MNEMONIC)
        assert account.address == Account.from_key(PRIVATE_KEY).address

    def test_requires_material(self):
        with pytest.raises(AssertionError):
            eth_account_from_key_material()


class TestCommonUtil:

    def test_unknown_level(self):
        with pytest.raises(ValueError):
            init_logging(level="LOUD")

    def test_ensure_parent_dir(self, tmp_path):
        target = tmp_path / "a" / "b" / "file.log"
        ensure_parent_dir(target)
        assert target.parent.is_dir()
        ensure_parent_dir("relative.log")
