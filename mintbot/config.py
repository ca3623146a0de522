# -*- coding: utf-8 -*-

import os
import math
import logging
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Optional

import yaml
from dotenv import load_dotenv
from web3 import Web3

from .errors import ConfigError
from .models import ActionSpec


logger = logging.getLogger(__name__)


EVM_PATH = Path(Path(__file__).parent.resolve(), "evm", "evm.yaml")

DEFAULT_CHAIN = "monad"
DEFAULT_NETWORK = "testnet"
DEFAULT_MINT_PRICE = "0.001"
DEFAULT_GAS_LIMIT = 300000
DEFAULT_GAS_MARKUP_PERCENT = 120
DEFAULT_POLL_INTERVAL = 15
DEFAULT_CONFIRMATION_TIMEOUT = 120
DEFAULT_MAX_ATTEMPTS = 3
DEFAULT_MAX_RETRY_DELAY = 300

TRUE_VALUES = {"1", "true", "yes", "y", "on"}
FALSE_VALUES = {"0", "false", "no", "n", "off", ""}


def load_evm_presets(path=EVM_PATH):
    with open(path, "r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


@dataclass(frozen=True)
class MintConfig:
    contract_address: str
    rpc_url: str
    private_key: str = field(default="", repr=False)
    mnemonic: str = field(default="", repr=False)

    chain: str = DEFAULT_CHAIN
    network: str = DEFAULT_NETWORK
    chain_id: Optional[int] = None
    scan: str = ""
    symbol: str = "ETH"
    min_gas_price: int = 0
    rpc_timeout: float = 30

    unit_price: int = Web3.to_wei(Decimal(DEFAULT_MINT_PRICE), "ether")
    quantity: int = 1
    gas_limit: int = DEFAULT_GAS_LIMIT
    gas_markup_percent: int = DEFAULT_GAS_MARKUP_PERCENT
    use_contract_price: bool = False

    poll_interval: float = DEFAULT_POLL_INTERVAL
    poll_timeout: float = 0
    confirmation_timeout: float = DEFAULT_CONFIRMATION_TIMEOUT
    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    retry_backoff: float = 1.0
    max_retry_delay: Optional[float] = None

    mint_function: str = "mint"
    ready_function: str = "isMintActive"
    price_function: str = "mintPrice"

    success_log: str = "mint_success.log"
    error_log: str = "mint_error.log"
    log_file: Optional[str] = None
    log_level: str = "INFO"

    def __post_init__(self):
        errors = []
        if self.max_retry_delay is None:
            object.__setattr__(self, "max_retry_delay", max(DEFAULT_MAX_RETRY_DELAY, self.poll_interval))
        if not self.contract_address or not Web3.is_address(self.contract_address):
            errors.append(f"NFT_CONTRACT is not a valid address[{self.contract_address}]")
        if not (self.private_key or self.mnemonic):
            errors.append("PRIVATE_KEY or MNEMONIC is required")
        if not self.rpc_url:
            errors.append("RPC_URL is required")
        for name in ("quantity", "gas_limit", "gas_markup_percent", "max_attempts"):
            if getattr(self, name) <= 0:
                errors.append(f"{name} must be positive[{getattr(self, name)}]")
        # poll_timeout alone may be inf, meaning no time budget
        for name in ("poll_interval", "confirmation_timeout", "rpc_timeout", "retry_backoff", "max_retry_delay"):
            if not math.isfinite(getattr(self, name)):
                errors.append(f"{name} must be a finite number[{getattr(self, name)}]")
        for name in ("poll_interval", "confirmation_timeout", "rpc_timeout"):
            if getattr(self, name) <= 0:
                errors.append(f"{name} must be positive[{getattr(self, name)}]")
        if math.isnan(self.poll_timeout) or self.poll_timeout < 0:
            errors.append(f"poll_timeout must be >= 0[{self.poll_timeout}]")
        if self.unit_price < 0:
            errors.append(f"unit_price can't be negative[{self.unit_price}]")
        if self.retry_backoff < 1:
            errors.append(f"retry_backoff must be >= 1[{self.retry_backoff}]")
        if self.max_retry_delay < self.poll_interval:
            errors.append(f"max_retry_delay must be >= poll_interval[{self.max_retry_delay}]")
        names = (self.mint_function, self.ready_function, self.price_function)
        for name in ("mint_function", "ready_function", "price_function"):
            if not getattr(self, name).isidentifier():
                errors.append(f"{name} is not a valid function name[{getattr(self, name)}]")
        if len(set(names)) != len(names):
            errors.append(f"contract function names must be distinct[{', '.join(names)}]")
        if errors:
            raise ConfigError("; ".join(errors))

    def action_spec(self) -> ActionSpec:
        return ActionSpec(
            unit_price=self.unit_price,
            gas_limit=self.gas_limit,
            quantity=self.quantity,
            markup_numerator=self.gas_markup_percent,
            markup_denominator=100,
            min_gas_price=self.min_gas_price,
        )


def _get(environ, key, default=None):
    value = environ.get(key)
    if value is None:
        return default
    value = value.strip()
    return value if value != "" else default


def _parse(environ, key, default, cast):
    raw = _get(environ, key)
    if raw is None:
        return default
    try:
        return cast(raw)
    except (TypeError, ValueError, InvalidOperation) as e:
        raise ConfigError(f"Invalid {key}[{raw}]") from e


def _parse_bool(value):
    value = value.lower()
    if value in TRUE_VALUES:
        return True
    if value in FALSE_VALUES:
        return False
    raise ValueError(value)


def _parse_ether(value):
    return Web3.to_wei(Decimal(value), "ether")


def load_config(env_file=None, environ=None, presets=None) -> MintConfig:
    """Build a MintConfig from the environment.

    When ``environ`` is not given the process environment is used, after
    loading ``env_file`` (or ``.env`` found from the working directory).
    Chain presets from evm.yaml supply the RPC endpoint, chain id and
    explorer unless RPC_URL overrides the endpoint.
    """
    if environ is None:
        load_dotenv(env_file)
        environ = os.environ
    if presets is None:
        presets = load_evm_presets()

    chain = _get(environ, "CHAIN", DEFAULT_CHAIN).lower()
    network = _get(environ, "NETWORK", DEFAULT_NETWORK).lower()
    preset = presets.get(chain, {}).get(network)
    rpc_url = _get(environ, "RPC_URL")
    if preset is None:
        if not rpc_url:
            raise ConfigError(f"BlockChain Not Support[{chain}:{network}] and RPC_URL is empty")
        logger.warning(f"No Preset For[{chain}:{network}], Using RPC_URL Only")
        preset = {}

    return MintConfig(
        contract_address=_get(environ, "NFT_CONTRACT", ""),
        rpc_url=rpc_url or preset.get("endpoint_public", ""),
        private_key=_get(environ, "PRIVATE_KEY", ""),
        mnemonic=_get(environ, "MNEMONIC", ""),
        chain=chain,
        network=network,
        chain_id=_parse(environ, "CHAIN_ID", preset.get("chain_id"), int),
        scan=preset.get("scan", ""),
        symbol=preset.get("symbol", "ETH"),
        min_gas_price=int(preset.get("min_gasprice", 0)),
        rpc_timeout=_parse(environ, "RPC_TIMEOUT", 30, float),
        unit_price=_parse(environ, "MINT_PRICE", _parse_ether(DEFAULT_MINT_PRICE), _parse_ether),
        quantity=_parse(environ, "MINT_QUANTITY", 1, int),
        gas_limit=_parse(environ, "GAS_LIMIT", DEFAULT_GAS_LIMIT, int),
        gas_markup_percent=_parse(environ, "GAS_MARKUP_PERCENT", DEFAULT_GAS_MARKUP_PERCENT, int),
        use_contract_price=_parse(environ, "USE_CONTRACT_PRICE", False, _parse_bool),
        poll_interval=_parse(environ, "POLL_INTERVAL", DEFAULT_POLL_INTERVAL, float),
        poll_timeout=_parse(environ, "POLL_TIMEOUT", 0, float),
        confirmation_timeout=_parse(environ, "CONFIRMATION_TIMEOUT", DEFAULT_CONFIRMATION_TIMEOUT, float),
        max_attempts=_parse(environ, "MAX_MINT_ATTEMPTS", DEFAULT_MAX_ATTEMPTS, int),
        retry_backoff=_parse(environ, "RETRY_BACKOFF", 1.0, float),
        max_retry_delay=_parse(environ, "MAX_RETRY_DELAY", None, float),
        mint_function=_get(environ, "MINT_FUNCTION", "mint"),
        ready_function=_get(environ, "READY_FUNCTION", "isMintActive"),
        price_function=_get(environ, "PRICE_FUNCTION", "mintPrice"),
        success_log=_get(environ, "SUCCESS_LOG", "mint_success.log"),
        error_log=_get(environ, "ERROR_LOG", "mint_error.log"),
        log_file=_get(environ, "LOG_FILE"),
        log_level=_get(environ, "LOG_LEVEL", "INFO"),
    )
