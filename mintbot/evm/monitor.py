# -*- coding: utf-8 -*-

import argparse
import asyncio
import logging
import sys

from web3 import Web3

from ..config import load_config
from ..errors import MintBotError, FatalError, NetworkError, BudgetExhausted
from ..utils.common_util import init_logging
from ..utils.outcome_log import OutcomeLogger
from ..utils.retry import next_delay
from .chain_client import AsyncChainClient
from .executor import PricedActionExecutor
from .poller import ReadinessPoller


logger = logging.getLogger(__name__)


EXIT_SUCCESS = 0
EXIT_FAILURE = 1
EXIT_INTERRUPTED = 130


class MintMonitor(object):
    """Watch the contract until minting opens, then mint once.

    Funds are checked once up front; a short balance stops the run before
    any transaction is built. Each readiness observation leads to at most
    one mint attempt, and failed attempts are bounded by ``max_attempts``
    with the delay before the next check growing by ``retry_backoff``.
    """

    def __init__(self, config, client=None, outcome_logger=None):
        self.config = config
        self.client = client
        self.outcome_logger = outcome_logger or OutcomeLogger(config.success_log, config.error_log)
        self.spec = config.action_spec()
        self.poller = None
        self.executor = None
        self.failures = 0
        self._cancel_requested = False


    def _from_wei(self, value):
        return f"{Web3.from_wei(value, 'ether')} {self.config.symbol}"


    async def setup(self):
        if self.client is None:
            try:
                self.client = AsyncChainClient(self.config)
            except Exception as e:
                raise FatalError(f"Wallet Setup Failed[{type(e).__name__}: {e}]") from e
        try:
            chain_id = await self.client.check_connection()
        except NetworkError as e:
            raise FatalError(f"RPC Connection Failed[{e}]") from e
        logger.info(f"Wallet Setup Complete. Address[{self.client.wallet_address}] ChainId[{chain_id}]")

        self.poller = ReadinessPoller(
            self.client.is_ready,
            self.config.poll_interval,
            timeout=self.config.poll_timeout,
            name="mint-status",
        )
        self.executor = PricedActionExecutor(
            self.client,
            self.spec,
            self.outcome_logger,
            confirmation_timeout=self.config.confirmation_timeout,
            use_contract_price=self.config.use_contract_price,
        )
        if self._cancel_requested:
            self.poller.cancel()


    async def check_funds(self):
        try:
            balance = await self.client.get_balance()
        except NetworkError as e:
            raise FatalError(f"Balance Check Failed[{e}]") from e
        logger.info(f"Wallet Balance[{self._from_wei(balance)}]")
        if balance < self.spec.total_value:
            raise FatalError(
                f"Insufficient Funds For Minting! "
                f"Balance[{self._from_wei(balance)}] Required[{self._from_wei(self.spec.total_value)}]")
        return balance


    def cancel(self):
        self._cancel_requested = True
        if self.poller is not None:
            self.poller.cancel()


    async def monitor_and_mint(self) -> int:
        logger.info(f"Monitoring Mint Status Every {self.config.poll_interval}s...")
        delay = 0
        retry_delay = self.config.poll_interval
        while True:
            if not await self.poller.wait_ready(delay):
                logger.warning("Mint Monitor Cancelled")
                return EXIT_FAILURE

            outcome = await self.executor.execute()
            if outcome.ok:
                self.poller.cancel()
                logger.info("Minting Completed Successfully. Script Will Now Exit.")
                return EXIT_SUCCESS

            self.failures += 1
            if self.failures >= self.config.max_attempts:
                raise BudgetExhausted(
                    f"Mint Failed {self.failures} Times, Giving Up[{outcome.reason}]")
            delay = retry_delay
            retry_delay = next_delay(
                retry_delay, backoff=self.config.retry_backoff, max_delay=self.config.max_retry_delay)
            logger.warning(
                f"Mint Attempt[{self.failures}/{self.config.max_attempts}] Failed, "
                f"Resuming Polling In {delay}s")


    async def run(self) -> int:
        logger.info("Starting Auto Mint NFT...")
        try:
            await self.setup()
            await self.check_funds()
        except FatalError as e:
            logger.error(str(e))
            return EXIT_FAILURE
        return await self.monitor_and_mint()


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        prog="auto-mint",
        description="Poll an NFT contract until minting opens, then mint once.",
    )
    parser.add_argument("--env-file", default=None, help="dotenv file to load (default: .env)")
    parser.add_argument("--log-file", default=None, help="also write diagnostic logs to this file")
    parser.add_argument("--log-level", default=None, help="logging level (default: INFO)")
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    init_logging()
    try:
        config = load_config(env_file=args.env_file)
        init_logging(
            filename=args.log_file or config.log_file,
            level=args.log_level or config.log_level,
        )
        code = asyncio.run(MintMonitor(config).run())
    except KeyboardInterrupt:
        logger.warning("Script Interrupted By User. Exiting...")
        code = EXIT_INTERRUPTED
    except MintBotError as e:
        logger.error(f"Fatal Error[{type(e).__name__}: {e}]")
        code = EXIT_FAILURE
    except Exception:
        logger.exception("Fatal Error")
        code = EXIT_FAILURE
    sys.exit(code)


if __name__ == "__main__":
    main()
