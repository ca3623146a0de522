# -*- coding: utf-8 -*-

import asyncio
import logging
from dataclasses import replace

from web3 import Web3

from ..errors import NetworkError, SubmissionError, ConfirmationError, DuplicateSubmissionError
from ..models import ActionSpec, ActionOutcome, Success, Failure


logger = logging.getLogger(__name__)


class PricedActionExecutor(object):
    """Submit one priced mint transaction and wait for its confirmation.

    Every call to ``execute()`` sends at most one transaction and returns a
    Success or Failure outcome, which is also handed to the outcome logger.
    A call made while another one is still in flight raises
    DuplicateSubmissionError before touching the chain.
    """

    def __init__(self, client, spec: ActionSpec, outcome_logger,
                 confirmation_timeout=120, use_contract_price=False):
        self.client = client
        self.spec = spec
        self.outcome_logger = outcome_logger
        self.confirmation_timeout = confirmation_timeout
        self.use_contract_price = use_contract_price
        self.attempts = 0
        self._lock = asyncio.Lock()


    @property
    def in_flight(self):
        return self._lock.locked()


    async def _resolve_spec(self) -> ActionSpec:
        price = await self.client.get_unit_price()
        if price is None:
            return self.spec
        logger.info(f"Current Mint Price[{Web3.from_wei(price, 'ether')}]")
        if self.use_contract_price and price != self.spec.unit_price:
            return replace(self.spec, unit_price=price)
        return self.spec


    async def _attempt(self) -> ActionOutcome:
        spec = await self._resolve_spec()
        logger.info(f"Attempting To Mint[{spec.quantity}] Value[{spec.total_value}]")
        try:
            gas_price = await self.client.get_gas_price()
            adjusted = spec.adjusted_gas_price(gas_price)
            logger.info(f"Current GasPrice[{gas_price}] Adjusted[{adjusted}]")

            handle = await self.client.submit(spec, adjusted)
            logger.info(f"Waiting For Confirmation[{handle.tx_hash}]...")
            receipt = await self.client.await_confirmation(handle, self.confirmation_timeout)
        except (NetworkError, SubmissionError, ConfirmationError) as e:
            logger.error(f"Mint Failed[{e}]")
            return Failure(reason=str(e))

        logger.info(f"Mint Successful! Tx[{receipt.tx_hash}] Block[{receipt.block_number}]")
        logger.info(f"Gas Used[{receipt.gas_used}]")
        return Success(
            tx_hash=receipt.tx_hash,
            block_number=receipt.block_number,
            gas_used=receipt.gas_used,
        )


    async def execute(self) -> ActionOutcome:
        if self._lock.locked():
            raise DuplicateSubmissionError("Mint Already In Flight, Refusing Second Submission")
        async with self._lock:
            self.attempts += 1
            outcome = await self._attempt()
            self.outcome_logger.record(outcome)
            return outcome
