# -*- coding: utf-8 -*-

import asyncio
import logging
from asyncio import to_thread
from typing import Optional

from web3 import Web3
from web3.exceptions import TimeExhausted
from web3.middleware import ExtraDataToPOAMiddleware

from ..errors import NetworkError, SubmissionError, ConfirmationError, FatalError
from ..models import ActionSpec, TransactionHandle, ConfirmationReceipt
from ..utils.address_util import eth_account_from_key_material
from ..utils.retry import retry


logger = logging.getLogger(__name__)


def build_abi(mint_function="mint", ready_function="isMintActive", price_function="mintPrice"):
    return [
        {
            "inputs": [{"internalType": "uint256", "name": "quantity", "type": "uint256"}],
            "name": mint_function,
            "outputs": [],
            "stateMutability": "payable",
            "type": "function",
        },
        {
            "inputs": [],
            "name": ready_function,
            "outputs": [{"internalType": "bool", "name": "", "type": "bool"}],
            "stateMutability": "view",
            "type": "function",
        },
        {
            "inputs": [],
            "name": price_function,
            "outputs": [{"internalType": "uint256", "name": "", "type": "uint256"}],
            "stateMutability": "view",
            "type": "function",
        },
    ]


class AsyncChainClient(object):

    def __init__(self, config, web3=None, poll_latency=1.0):

        self.config = config
        self.scan = config.scan
        self.chain_id = config.chain_id
        self.poll_latency = poll_latency

        # web3 client
        self.web3 = web3 if web3 is not None else self._build_web3(config)
        self.nonce_lock = asyncio.Lock()

        # wallet account
        self.account = eth_account_from_key_material(config.private_key, config.mnemonic)
        self.wallet_address = self.account.address

        self.contract = self.web3.eth.contract(
            address=Web3.to_checksum_address(config.contract_address),
            abi=build_abi(config.mint_function, config.ready_function, config.price_function),
        )


    @staticmethod
    def _build_web3(config):
        web3 = Web3(Web3.HTTPProvider(config.rpc_url, request_kwargs={"timeout": config.rpc_timeout}))
        web3.middleware_onion.inject(ExtraDataToPOAMiddleware, layer=0)
        return web3


    def _function(self, name):
        return self.contract.get_function_by_name(name)


    async def _read(self, what, fn, *args, **kwargs):
        try:
            return await to_thread(fn, *args, **kwargs)
        except Exception as e:
            raise NetworkError(f"{what} Failed[{type(e).__name__}: {e}]") from e


    def get_scan_transaction(self, txid):
        if not self.scan:
            return txid
        return f"{self.scan}/tx/{txid}"


    async def check_connection(self) -> int:
        chain_id = await self._read("GetChainId", lambda: self.web3.eth.chain_id)
        if self.chain_id is not None and chain_id != self.chain_id:
            raise FatalError(f"ChainId Mismatch[expected {self.chain_id}, rpc {chain_id}]")
        self.chain_id = chain_id
        return chain_id


    async def get_balance(self) -> int:
        return await self._read("GetBalance", self.web3.eth.get_balance, self.wallet_address)


    async def is_ready(self) -> bool:
        fn = self._function(self.config.ready_function)
        return bool(await self._read("ReadinessCheck", fn().call))


    async def get_unit_price(self) -> Optional[int]:
        fn = self._function(self.config.price_function)
        try:
            price = await self._read("GetMintPrice", fn().call)
        except NetworkError as e:
            logger.info(f"Couldn't Fetch Mint Price, Using Default Value[{e}]")
            return None
        return int(price)


    @retry(exceptions=NetworkError, tries=3, delay=0.5)
    async def get_gas_price(self) -> int:
        return int(await self._read("GetGasPrice", lambda: self.web3.eth.gas_price))


    def _build_mint_transaction(self, spec: ActionSpec, gas_price: int, nonce: int):
        params = {
            "from": self.wallet_address,
            "value": spec.total_value,
            "gas": spec.gas_limit,
            "gasPrice": gas_price,
            "nonce": nonce,
        }
        if self.chain_id is not None:
            params["chainId"] = self.chain_id
        fn = self._function(self.config.mint_function)
        return fn(spec.quantity).build_transaction(params)


    async def submit(self, spec: ActionSpec, gas_price: int) -> TransactionHandle:
        try:
            async with self.nonce_lock:
                nonce = await to_thread(
                    self.web3.eth.get_transaction_count, self.wallet_address, "pending")
                tx = await to_thread(self._build_mint_transaction, spec, gas_price, nonce)
                signed = self.account.sign_transaction(tx)
                response = await to_thread(
                    self.web3.eth.send_raw_transaction, signed.raw_transaction)
        except Exception as e:
            raise SubmissionError(f"Mint Submission Failed[{type(e).__name__}: {e}]") from e

        tx_hash = Web3.to_hex(response)
        logger.info(f"Mint Transaction Submitted[{tx_hash}] Nonce[{nonce}] GasPrice[{gas_price}]")
        logger.info(f"Explorer[{self.get_scan_transaction(tx_hash)}]")
        return TransactionHandle(tx_hash=tx_hash, nonce=nonce, gas_price=gas_price, value=spec.total_value)


    async def await_confirmation(self, handle: TransactionHandle, timeout: float) -> ConfirmationReceipt:
        try:
            receipt = await to_thread(
                self.web3.eth.wait_for_transaction_receipt,
                handle.tx_hash, timeout=timeout, poll_latency=self.poll_latency)
        except TimeExhausted as e:
            raise ConfirmationError(f"Tx Not Confirmed Within {timeout}s[{handle.tx_hash}]") from e
        except Exception as e:
            raise ConfirmationError(
                f"GetTransactionReceipt Error[{handle.tx_hash}][{type(e).__name__}: {e}]") from e

        if receipt["status"] != 1:
            raise ConfirmationError(
                f"Tx Reverted In Block[{receipt['blockNumber']}][{handle.tx_hash}]")
        return ConfirmationReceipt(
            tx_hash=handle.tx_hash,
            block_number=int(receipt["blockNumber"]),
            gas_used=int(receipt["gasUsed"]),
            status=int(receipt["status"]),
        )
