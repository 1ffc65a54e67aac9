"""
Module Fixtures - seeded tables answering queries in place of chain state.

Tables are only ever replaced as a whole; nothing here merges into an existing table.
"""

from dataclasses import dataclass, field
from typing import Dict, Iterable, Optional, Tuple

from core.types import Coin, ContractConfig, uint128


class NativeBalanceTable:
    """One native coin per account."""

    def __init__(self, balances: Optional[Dict[str, Coin]] = None):
        self.balances: Dict[str, Coin] = balances or {}

    @staticmethod
    def from_pairs(pairs: Iterable[Tuple[str, Coin]]) -> "NativeBalanceTable":
        balances: Dict[str, Coin] = {}
        for account, coin in pairs:
            balances[account] = Coin(denom=coin.denom, amount=coin.amount)
        return NativeBalanceTable(balances)

    def get(self, account: str) -> Optional[Coin]:
        return self.balances.get(account)

    def __len__(self) -> int:
        return len(self.balances)


class TokenBalanceTable:
    """Token contract address -> holder address -> amount."""

    def __init__(self, balances: Optional[Dict[str, Dict[str, int]]] = None):
        self.balances: Dict[str, Dict[str, int]] = balances or {}

    @staticmethod
    def from_pairs(pairs: Iterable[Tuple[str, Iterable[Tuple[str, int]]]]) -> "TokenBalanceTable":
        balances: Dict[str, Dict[str, int]] = {}
        for contract, holders in pairs:
            contract_balances: Dict[str, int] = {}
            for holder, amount in holders:
                contract_balances[holder] = uint128(amount)
            balances[contract] = contract_balances
        return TokenBalanceTable(balances)

    def holders(self, contract: str) -> Optional[Dict[str, int]]:
        """Holder mapping of a token contract, or None if the contract was never seeded."""
        return self.balances.get(contract)

    def total_supply(self, contract: str) -> int:
        """Sum of all holder amounts; an unseeded or empty contract has zero supply."""
        return uint128(sum(self.balances.get(contract, {}).values()))

    def __len__(self) -> int:
        return len(self.balances)


@dataclass
class FixtureSet:
    native: NativeBalanceTable = field(default_factory=NativeBalanceTable)
    tokens: TokenBalanceTable = field(default_factory=TokenBalanceTable)
    contract_config: ContractConfig = field(default_factory=ContractConfig)
