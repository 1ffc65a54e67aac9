import copy
import sys
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import yaml

from core.crypto_layer import AddressApi
from core.types import Coin, ContractConfig, FullDelegation, Validator

MOCK_CONTRACT_ADDR = "cosmos2contract"

DEFAULT_CONFIG: Dict[str, Any] = {
    "querier": {
        "contract_addr": MOCK_CONTRACT_ADDR,
        "contract_config": {
            "token_contract_registered": False,
            "token_contract": "token",
            "protocol_fee_collector": None,
            "rewards_contract": None,
        },
        "token_info": {
            "name": "bluna",
            "symbol": "BLUNA",
            "decimals": 6,
            "minter": "hub",
            "cap": None,
        },
        # Checked in order before the seeded native balances.
        # A rule without amount answers with the seeded coin of that account.
        "reserved_balances": [
            {"address": "reward", "denom": "uusd", "amount": 2000},
            {"address": MOCK_CONTRACT_ADDR, "denom": "uluna"},
        ],
        "reserved_all_balances": {
            "reward": [{"denom": "uluna", "amount": 1000}],
            MOCK_CONTRACT_ADDR: [{"denom": "uluna", "amount": 1000}],
        },
    },
    "fixtures": {
        "native_balances": [],
        "token_balances": {},
        "staking": None,
    },
}


def _merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    # nested mappings are merged, everything else is replaced
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(base.get(key), dict):
            _merge(base[key], value)
        else:
            base[key] = value
    return base


def load_config(path: Optional[str] = None) -> Dict[str, Any]:
    """
    Load a YAML config file over the defaults.

    Args:
        path: YAML file; None returns the defaults

    Returns:
        Full config dict with "querier" and "fixtures" sections
    """
    config = copy.deepcopy(DEFAULT_CONFIG)
    if path is None:
        return config

    try:
        with open(path, "r") as f:
            loaded = yaml.safe_load(f) or {}
    except FileNotFoundError:
        print(f"Config file not found at {path}, using defaults.", file=sys.stderr)
        return config

    if not isinstance(loaded, dict):
        raise ValueError(f"Config file {path} must contain a mapping at top level")
    return _merge(config, loaded)


@dataclass
class BalanceRule:
    address: str
    denom: str
    amount: Optional[int] = None

    def matches(self, account: str, denom: str) -> bool:
        return self.address == account and self.denom == denom


@dataclass
class QuerierSettings:
    """Parsed "querier" section."""
    contract_addr: str
    contract_config: ContractConfig
    token_name: str
    token_symbol: str
    token_decimals: int
    token_minter: str
    token_cap: Optional[int]
    balance_rules: List[BalanceRule] = field(default_factory=list)
    all_balances: Dict[str, List[Coin]] = field(default_factory=dict)

    @staticmethod
    def from_config(config: Dict[str, Any], api: AddressApi) -> "QuerierSettings":
        section = config["querier"]
        token = section["token_info"]
        return QuerierSettings(
            contract_addr=section["contract_addr"],
            contract_config=contract_config_from(section["contract_config"], api),
            token_name=token["name"],
            token_symbol=token["symbol"],
            token_decimals=int(token["decimals"]),
            token_minter=token["minter"],
            token_cap=None if token.get("cap") is None else int(token["cap"]),
            balance_rules=[
                BalanceRule(e["address"], e["denom"], e.get("amount"))
                for e in section.get("reserved_balances") or []
            ],
            all_balances={
                address: [Coin.from_dict(c) for c in coins]
                for address, coins in (section.get("reserved_all_balances") or {}).items()
            },
        )


def contract_config_from(data: Dict[str, Any], api: AddressApi) -> ContractConfig:
    def ref(name):
        value = data.get(name)
        return None if value is None else api.addr_canonicalize(value)

    return ContractConfig(
        token_contract_registered=bool(data.get("token_contract_registered", False)),
        token_contract=ref("token_contract"),
        protocol_fee_collector=ref("protocol_fee_collector"),
        rewards_contract=ref("rewards_contract"),
    )


def _validator_from(data: Dict[str, Any]) -> Validator:
    # decimals may come out of YAML as floats
    return Validator(
        address=data["address"],
        commission=str(data["commission"]),
        max_commission=str(data["max_commission"]),
        max_change_rate=str(data["max_change_rate"]),
    )


def _full_delegation_from(data: Dict[str, Any]) -> FullDelegation:
    return FullDelegation(
        delegator=data["delegator"],
        validator=data["validator"],
        amount=Coin.from_dict(data["amount"]),
        can_redelegate=Coin.from_dict(data["can_redelegate"]),
        accumulated_rewards=[Coin.from_dict(c) for c in data.get("accumulated_rewards") or []],
    )


def apply_fixtures(simulator, fixtures: Optional[Dict[str, Any]]) -> None:
    """Seed a simulator from the "fixtures" section of a config."""
    if not fixtures:
        return

    native = fixtures.get("native_balances")
    if native:
        simulator.with_native_balances(
            [(e["address"], Coin(e["denom"], e["amount"])) for e in native]
        )

    tokens = fixtures.get("token_balances")
    if tokens:
        simulator.with_token_balances(
            [(contract, list((holders or {}).items())) for contract, holders in tokens.items()]
        )

    staking = fixtures.get("staking")
    if staking:
        simulator.update_staking(
            staking["denom"],
            [_validator_from(v) for v in staking.get("validators") or []],
            [_full_delegation_from(d) for d in staking.get("delegations") or []],
        )
