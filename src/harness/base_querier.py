from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from core.encoding import CodecError, to_binary
from core.types import Coin, BalanceResponse, AllBalanceResponse, Validator, FullDelegation
from querier.envelope import SystemFailure, SystemResult, encode_ok
from querier.errors import MalformedRequest
from querier.query import Query, RawRead, SmartCall, BalanceOf, AllBalances, Delegated, str_field


class MockQuerier:
    """
    Generic chain querier used as the base handler.
    Answers bank and staking queries from plain state; no contract is deployed.
    """

    def __init__(self, balances: Iterable[Tuple[str, Sequence[Coin]]] = ()):
        self.balances: Dict[str, List[Coin]] = {}
        for address, coins in balances:
            self.update_balance(address, coins)

        self.bonded_denom = ""
        self.validators: List[Validator] = []
        self.delegations: List[FullDelegation] = []

    def update_balance(self, address: str, coins: Sequence[Coin]) -> None:
        self.balances[address] = [Coin(c.denom, c.amount) for c in coins]

    def update_staking(
        self,
        denom: str,
        validators: Sequence[Validator],
        delegations: Sequence[FullDelegation],
    ) -> None:
        self.bonded_denom = denom
        self.validators = list(validators)
        self.delegations = list(delegations)

    def handle_query(self, query: Query) -> SystemResult:
        if isinstance(query, BalanceOf):
            return encode_ok(BalanceResponse(self._balance(query.account, query.denom)))
        if isinstance(query, AllBalances):
            return encode_ok(AllBalanceResponse(list(self.balances.get(query.account, []))))
        if isinstance(query, (RawRead, SmartCall)):
            return SystemResult.err(SystemFailure.no_such_contract(query.target))

        if query.family == "staking":
            try:
                return encode_ok(self._staking(query))
            except CodecError as e:
                raise MalformedRequest(
                    f"Parsing query request: {e}",
                    to_binary({query.family: {query.name: query.body}}),
                ) from e
        if query.family == "wasm":
            addr = query.body.get("contract_addr", "") if isinstance(query.body, dict) else ""
            return SystemResult.err(SystemFailure.no_such_contract(addr))
        return SystemResult.err(SystemFailure.unsupported_request(query.family))

    def _balance(self, address: str, denom: str) -> Coin:
        for coin in self.balances.get(address, []):
            if coin.denom == denom:
                return Coin(coin.denom, coin.amount)
        return Coin(denom, 0)

    def _staking(self, query: Delegated) -> dict:
        body = query.body
        if query.name == "bonded_denom":
            return {"denom": self.bonded_denom}
        if query.name == "all_validators":
            return {"validators": [v.to_dict() for v in self.validators]}
        if query.name == "validator":
            address = str_field(body, "address")
            found = self._find_validator(address)
            return {"validator": found.to_dict() if found else None}
        if query.name == "all_delegations":
            delegator = str_field(body, "delegator")
            return {
                "delegations": [
                    d.to_delegation().to_dict() for d in self.delegations if d.delegator == delegator
                ]
            }
        if query.name == "delegation":
            delegator = str_field(body, "delegator")
            validator = str_field(body, "validator")
            for d in self.delegations:
                if d.delegator == delegator and d.validator == validator:
                    return {"delegation": d.to_dict()}
            return {"delegation": None}
        raise CodecError(f"unknown variant `{query.name}` of staking query")

    def _find_validator(self, address: str) -> Optional[Validator]:
        for v in self.validators:
            if v.address == address:
                return v
        return None
