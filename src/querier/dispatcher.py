"""
Module Dispatcher - routes a classified query to the fixture lookup answering it.

Rules are tried in order and the first match wins. Order matters: the
storage key rules overlap structurally and the reserved balance rules must be
checked before the seeded tables.
"""

from typing import Any, Callable, List, Tuple

from core.crypto_layer import AddressApi, AddressError
from core.encoding import to_length_prefixed
from core.types import (
    Coin,
    BalanceResponse,
    AllBalanceResponse,
    TokenBalanceResponse,
    TokenInfoResponse,
    MinterData,
)
from querier.config import QuerierSettings
from querier.envelope import SystemResult, encode_ok, encode_not_found
from querier.errors import MalformedRequest, NoFixtureError, Unimplemented, Fatal
from querier.fixtures import FixtureSet
from querier.query import (
    Query,
    RawRead,
    SmartCall,
    BalanceOf,
    AllBalances,
    TokenInfoQuery,
    TokenBalanceQuery,
    UnsupportedTokenQuery,
    decode_token_query,
)

CONFIG_KEY = to_length_prefixed(b"config")
BALANCE_PREFIX = to_length_prefixed(b"balance")

FALLBACK = "fallback"

Rule = Tuple[str, Callable[[Query], bool], Callable[[Any], Any]]


class Dispatcher:
    def __init__(
        self,
        fixtures: FixtureSet,
        settings: QuerierSettings,
        api: AddressApi,
        fallback: Callable[[Query], SystemResult],
    ):
        self.fixtures = fixtures
        self.settings = settings
        self.api = api
        self.fallback = fallback

        self.rules: List[Rule] = [
            ("raw_config", self._is_raw_config, self._raw_config),
            ("raw_balance", self._is_raw_balance, self._raw_balance),
            ("raw_other", lambda q: isinstance(q, RawRead), self._raw_other),
            ("bank_balance", lambda q: isinstance(q, BalanceOf), self._bank_balance),
            ("bank_all_balances", lambda q: isinstance(q, AllBalances), self._bank_all_balances),
            ("smart", lambda q: isinstance(q, SmartCall), self._smart),
        ]

    def route(self, query: Query) -> str:
        """Name of the rule that answers the query."""
        for name, matches, _ in self.rules:
            if matches(query):
                return name
        return FALLBACK

    def dispatch(self, query: Query) -> SystemResult:
        """
        Answer a query.

        Fixture misses become an inner error. MalformedRequest, Unimplemented
        and Fatal propagate to the caller.
        """
        for _, matches, handler in self.rules:
            if matches(query):
                try:
                    return encode_ok(handler(query))
                except NoFixtureError as e:
                    return encode_not_found(str(e))
        return self.fallback(query)

    # ---- raw storage reads ----

    def _is_raw_config(self, query: Query) -> bool:
        return isinstance(query, RawRead) and query.key == CONFIG_KEY

    def _is_raw_balance(self, query: Query) -> bool:
        return isinstance(query, RawRead) and query.key.startswith(BALANCE_PREFIX)

    def _raw_config(self, query: RawRead):
        return self.fixtures.contract_config

    def _raw_balance(self, query: RawRead) -> str:
        holders = self._token_holders(query.target)

        holder_raw = query.key[len(BALANCE_PREFIX):]
        try:
            holder = self.api.addr_humanize(holder_raw)
        except AddressError as e:
            raise MalformedRequest(f"Parsing query request: {e}", query.key) from e

        if holder not in holders:
            raise NoFixtureError("Balance not found")
        # stored as Uint128, i.e. a json string
        return str(holders[holder])

    def _raw_other(self, query: RawRead):
        raise Unimplemented(
            f"raw query on {query.target} for key {query.key.hex()} is not simulated"
        )

    # ---- bank ----

    def _bank_balance(self, query: BalanceOf) -> BalanceResponse:
        for rule in self.settings.balance_rules:
            if not rule.matches(query.account, query.denom):
                continue
            if rule.amount is not None:
                return BalanceResponse(Coin(query.denom, rule.amount))
            coin = self.fixtures.native.get(query.account)
            if coin is None:
                raise NoFixtureError("balance not found")
            return BalanceResponse(Coin(coin.denom, coin.amount))

        coin = self.fixtures.native.get(query.account)
        if coin is None or coin.denom != query.denom:
            raise NoFixtureError("balance not found")
        return BalanceResponse(Coin(coin.denom, coin.amount))

    def _bank_all_balances(self, query: AllBalances) -> AllBalanceResponse:
        coins = self.settings.all_balances.get(query.account)
        if coins is None:
            raise Unimplemented(f"all balances of {query.account} are not simulated")
        return AllBalanceResponse([Coin(c.denom, c.amount) for c in coins])

    # ---- token contracts ----

    def _token_holders(self, contract: str):
        holders = self.fixtures.tokens.holders(contract)
        if holders is None:
            raise NoFixtureError(f"No balance info exists for the contract {contract}")
        return holders

    def _smart(self, query: SmartCall):
        token_query = decode_token_query(query.payload)

        if isinstance(token_query, UnsupportedTokenQuery):
            raise Fatal(f"token query `{token_query.name}` must never reach the querier")

        holders = self._token_holders(query.target)

        if isinstance(token_query, TokenInfoQuery):
            return TokenInfoResponse(
                name=self.settings.token_name,
                symbol=self.settings.token_symbol,
                decimals=self.settings.token_decimals,
                total_supply=self.fixtures.tokens.total_supply(query.target),
                mint=MinterData(minter=self.settings.token_minter, cap=self.settings.token_cap),
            )

        if isinstance(token_query, TokenBalanceQuery):
            # every account implicitly holds zero of a known token
            return TokenBalanceResponse(balance=holders.get(token_query.address, 0))

        raise Fatal(f"unexpected token query {token_query!r}")
