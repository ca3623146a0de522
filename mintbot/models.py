# -*- coding: utf-8 -*-

from dataclasses import dataclass, field
from typing import Union


@dataclass(frozen=True)
class ActionSpec:
    """Parameters of one priced mint call.

    Prices are integers in the chain's smallest unit (wei). The gas price
    markup is kept as a fraction so the adjustment stays in integer
    arithmetic: 120/100 adds 20% headroom, and the division truncates.
    """

    unit_price: int
    gas_limit: int
    quantity: int = 1
    markup_numerator: int = 120
    markup_denominator: int = 100
    min_gas_price: int = 0

    def __post_init__(self):
        assert self.quantity > 0, f"Mint Quantity Error => [{self.quantity}]"
        assert self.gas_limit > 0, f"Gas Limit Error => [{self.gas_limit}]"
        assert self.unit_price >= 0, f"Unit Price Error => [{self.unit_price}]"
        assert self.markup_numerator > 0 and self.markup_denominator > 0, (
            f"Gas Markup Error => [{self.markup_numerator}/{self.markup_denominator}]")

    @property
    def total_value(self) -> int:
        return self.unit_price * self.quantity

    def adjusted_gas_price(self, gas_price: int) -> int:
        adjusted = gas_price * self.markup_numerator // self.markup_denominator
        return max(adjusted, self.min_gas_price)


@dataclass(frozen=True)
class TransactionHandle:
    tx_hash: str
    nonce: int
    gas_price: int
    value: int


@dataclass(frozen=True)
class ConfirmationReceipt:
    tx_hash: str
    block_number: int
    gas_used: int
    status: int = 1


@dataclass(frozen=True)
class Success:
    tx_hash: str
    block_number: int
    gas_used: int
    ok: bool = field(default=True, init=False)


@dataclass(frozen=True)
class Failure:
    reason: str
    ok: bool = field(default=False, init=False)


ActionOutcome = Union[Success, Failure]
