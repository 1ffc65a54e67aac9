from dataclasses import dataclass, asdict, field
from typing import List, Optional

from .encoding import encode_b64, decode_b64

UINT128_MAX = 2 ** 128 - 1


def uint128(value) -> int:
    """Parse an amount given as int or decimal string, rejecting anything outside Uint128."""
    if isinstance(value, bool):
        raise ValueError(f"Invalid amount: {value!r}")
    if isinstance(value, str):
        if not value.isdigit():
            raise ValueError(f"Invalid amount: {value!r}")
        value = int(value)
    if not isinstance(value, int):
        raise ValueError(f"Invalid amount: {value!r}")
    if value < 0 or value > UINT128_MAX:
        raise ValueError(f"Amount out of range: {value}")
    return value


@dataclass
class Coin:
    denom: str
    amount: int

    def __post_init__(self):
        self.amount = uint128(self.amount)

    def to_dict(self) -> dict:
        return {"denom": self.denom, "amount": str(self.amount)}

    @staticmethod
    def from_dict(data: dict) -> "Coin":
        return Coin(denom=data["denom"], amount=data["amount"])


@dataclass
class BalanceResponse:
    amount: Coin

    def to_dict(self) -> dict:
        return {"amount": self.amount.to_dict()}


@dataclass
class AllBalanceResponse:
    amount: List[Coin]

    def to_dict(self) -> dict:
        return {"amount": [c.to_dict() for c in self.amount]}


@dataclass
class TokenBalanceResponse:
    balance: int

    def to_dict(self) -> dict:
        return {"balance": str(self.balance)}


@dataclass
class MinterData:
    minter: str
    cap: Optional[int] = None

    def to_dict(self) -> dict:
        return {
            "minter": self.minter,
            "cap": None if self.cap is None else str(self.cap),
        }


@dataclass
class TokenInfoResponse:
    """Token metadata as stored by a cw20 token contract."""
    name: str
    symbol: str
    decimals: int
    total_supply: int
    mint: Optional[MinterData] = None

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "symbol": self.symbol,
            "decimals": self.decimals,
            "total_supply": str(self.total_supply),
            "mint": self.mint.to_dict() if self.mint else None,
        }


@dataclass
class ContractConfig:
    """
    Hub contract config kept under the "config" storage key.
    Contract references are canonical addresses.
    """
    token_contract_registered: bool = False
    token_contract: Optional[bytes] = None
    protocol_fee_collector: Optional[bytes] = None
    rewards_contract: Optional[bytes] = None

    def to_dict(self) -> dict:
        def ref(value):
            return None if value is None else encode_b64(value)

        return {
            "token_contract_registered": self.token_contract_registered,
            "token_contract": ref(self.token_contract),
            "protocol_fee_collector": ref(self.protocol_fee_collector),
            "rewards_contract": ref(self.rewards_contract),
        }

    @staticmethod
    def from_dict(data: dict) -> "ContractConfig":
        def ref(value):
            return None if value is None else decode_b64(value)

        return ContractConfig(
            token_contract_registered=data["token_contract_registered"],
            token_contract=ref(data.get("token_contract")),
            protocol_fee_collector=ref(data.get("protocol_fee_collector")),
            rewards_contract=ref(data.get("rewards_contract")),
        )


@dataclass
class Validator:
    address: str
    commission: str
    max_commission: str
    max_change_rate: str

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class Delegation:
    delegator: str
    validator: str
    amount: Coin

    def to_dict(self) -> dict:
        return {
            "delegator": self.delegator,
            "validator": self.validator,
            "amount": self.amount.to_dict(),
        }


@dataclass
class FullDelegation:
    delegator: str
    validator: str
    amount: Coin
    can_redelegate: Coin
    accumulated_rewards: List[Coin] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "delegator": self.delegator,
            "validator": self.validator,
            "amount": self.amount.to_dict(),
            "can_redelegate": self.can_redelegate.to_dict(),
            "accumulated_rewards": [c.to_dict() for c in self.accumulated_rewards],
        }

    def to_delegation(self) -> Delegation:
        return Delegation(self.delegator, self.validator, self.amount)
