"""Shared test fixtures."""

import asyncio
from pathlib import Path

import pytest

from mintbot.config import MintConfig
from mintbot.models import ConfirmationReceipt, TransactionHandle
from mintbot.utils.outcome_log import OutcomeLogger


CONTRACT = "0x" + "11" * 20
PRIVATE_KEY = "0x4c0883a69102937d6231471b5dbb6204fe5129617082792ae468d01a3f362318"
ONE_ETHER = 10 ** 18
GWEI = 10 ** 9


class FakeChainClient:
    """Scripted stand-in for AsyncChainClient.

    ``ready`` is consumed one value per check and its last value repeats;
    Exception instances in it are raised. ``submit_errors`` and
    ``confirm_errors`` are consumed one per attempt, ``None`` meaning the
    step succeeds.
    """

    def __init__(self, balance=ONE_ETHER, ready=(True,), gas_price=GWEI, unit_price=None,
                 submit_errors=(), confirm_errors=(), gas_errors=(), latency=0.0):
        self.wallet_address = "0x" + "22" * 20
        self.balance = balance
        self.ready = list(ready)
        self.gas_price = gas_price
        self.unit_price = unit_price
        self.submit_errors = list(submit_errors)
        self.confirm_errors = list(confirm_errors)
        self.gas_errors = list(gas_errors)
        self.latency = latency
        self.calls = []
        self.ready_times = []
        self.submitted = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def check_connection(self):
        self.calls.append("check_connection")
        return 10143

    async def get_balance(self):
        self.calls.append("get_balance")
        return self.balance

    async def is_ready(self):
        self.calls.append("is_ready")
        self.ready_times.append(asyncio.get_running_loop().time())
        value = self.ready.pop(0) if len(self.ready) > 1 else self.ready[0]
        if isinstance(value, Exception):
            raise value
        return value

    async def get_unit_price(self):
        self.calls.append("get_unit_price")
        return self.unit_price

    async def get_gas_price(self):
        self.calls.append("get_gas_price")
        error = self.gas_errors.pop(0) if self.gas_errors else None
        if error is not None:
            raise error
        return self.gas_price

    async def submit(self, spec, gas_price):
        self.calls.append("submit")
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        await asyncio.sleep(self.latency)
        self.submitted.append((spec, gas_price))
        error = self.submit_errors.pop(0) if self.submit_errors else None
        if error is not None:
            self.in_flight -= 1
            raise error
        tx_hash = "0x" + f"{len(self.submitted):064x}"
        return TransactionHandle(tx_hash=tx_hash, nonce=len(self.submitted) - 1,
                                 gas_price=gas_price, value=spec.total_value)

    async def await_confirmation(self, handle, timeout):
        self.calls.append("await_confirmation")
        try:
            await asyncio.sleep(self.latency)
            error = self.confirm_errors.pop(0) if self.confirm_errors else None
            if error is not None:
                raise error
            return ConfirmationReceipt(tx_hash=handle.tx_hash, block_number=1000 + len(self.submitted),
                                       gas_used=21000)
        finally:
            self.in_flight -= 1


def read_lines(path):
    path = Path(path)
    if not path.exists():
        return []
    return path.read_text(encoding="utf-8").splitlines()


@pytest.fixture
def make_config(tmp_path):
    """Return a factory for MintConfig with fast timings and temp log files."""

    def _make(**overrides):
        values = {
            "contract_address": CONTRACT,
            "rpc_url": "http://127.0.0.1:8545",
            "private_key": PRIVATE_KEY,
            "chain_id": 10143,
            "symbol": "MON",
            "poll_interval": 0.05,
            "confirmation_timeout": 1,
            "success_log": str(tmp_path / "mint_success.log"),
            "error_log": str(tmp_path / "mint_error.log"),
        }
        values.update(overrides)
        return MintConfig(**values)

    return _make


@pytest.fixture
def outcome_logger(tmp_path):
    return OutcomeLogger(str(tmp_path / "mint_success.log"), str(tmp_path / "mint_error.log"))
