"""
Module Simulator - the querier handed to code under test.

Seed the fixture tables first, then let the code under test send queries:

    sim = new_simulator([Coin("uluna", 1000)])
    sim.with_token_balances([("token", [("alice", 100)])])
    result = sim.raw_query(request_bytes)
"""

from typing import Any, Dict, Iterable, Optional, Sequence, TextIO, Tuple

from core.crypto_layer import AddressApi
from core.types import Coin, ContractConfig, FullDelegation, Validator
from harness.base_querier import MockQuerier
from querier.config import QuerierSettings, load_config
from querier.dispatcher import Dispatcher
from querier.envelope import SystemResult, encode_malformed
from querier.errors import MalformedRequest, Unimplemented, Fatal
from querier.fixtures import FixtureSet, NativeBalanceTable, TokenBalanceTable
from querier.logging_utils import JsonLinesLogger
from querier.query import AllBalances, BalanceOf, Query, RawRead, SmartCall, classify


def _outcome(result: SystemResult) -> str:
    if not result.is_ok():
        return "system_error"
    if not result.result.is_ok():
        return "not_found"
    return "ok"


def _target(query: Query) -> Optional[str]:
    if isinstance(query, (RawRead, SmartCall)):
        return query.target
    if isinstance(query, (BalanceOf, AllBalances)):
        return query.account
    return None


class QuerySimulator:
    def __init__(
        self,
        base: MockQuerier,
        config: Optional[Dict[str, Any]] = None,
        trace_file: Optional[TextIO] = None,
    ):
        self.base = base
        self.config = config if config is not None else load_config()
        self.api = AddressApi()
        self.settings = QuerierSettings.from_config(self.config, self.api)
        self.fixtures = FixtureSet(contract_config=self.settings.contract_config)
        self.logger = JsonLinesLogger(trace_file)
        self.dispatcher = Dispatcher(self.fixtures, self.settings, self.api, self.base.handle_query)

    @property
    def contract_addr(self) -> str:
        return self.settings.contract_addr

    def raw_query(self, bin_request: bytes) -> SystemResult:
        """Classify, dispatch and encode one serialized query."""
        try:
            query = classify(bin_request)
        except MalformedRequest as e:
            self.logger.log_event(event="query", outcome="malformed", extra={"error": e.error})
            return encode_malformed(e)
        return self.handle_query(query)

    def handle_query(self, query: Query) -> SystemResult:
        rule = self.dispatcher.route(query)
        log_args = {"event": "query", "kind": query.kind.value, "target": _target(query)}
        try:
            result = self.dispatcher.dispatch(query)
        except MalformedRequest as e:
            self.logger.log_event(outcome="malformed", extra={"rule": rule, "error": e.error}, **log_args)
            return encode_malformed(e)
        except Unimplemented:
            self.logger.log_event(outcome="unimplemented", extra={"rule": rule}, **log_args)
            raise
        except Fatal:
            self.logger.log_event(outcome="fatal", extra={"rule": rule}, **log_args)
            raise

        self.logger.log_event(outcome=_outcome(result), extra={"rule": rule}, **log_args)
        return result

    # ---- fixture configuration; every call replaces its table ----

    def with_native_balances(self, balances: Iterable[Tuple[str, Coin]]) -> None:
        self.fixtures.native = NativeBalanceTable.from_pairs(balances)
        self.logger.log_event(
            event="fixtures", extra={"table": "native_balances", "entries": len(self.fixtures.native)}
        )

    def with_token_balances(self, balances: Iterable[Tuple[str, Iterable[Tuple[str, int]]]]) -> None:
        self.fixtures.tokens = TokenBalanceTable.from_pairs(balances)
        self.logger.log_event(
            event="fixtures", extra={"table": "token_balances", "entries": len(self.fixtures.tokens)}
        )

    def with_contract_config(self, config: ContractConfig) -> None:
        self.fixtures.contract_config = config
        self.logger.log_event(event="fixtures", extra={"table": "contract_config", "entries": 1})

    def update_staking(
        self,
        denom: str,
        validators: Sequence[Validator],
        delegations: Sequence[FullDelegation],
    ) -> None:
        self.base.update_staking(denom, validators, delegations)
        self.logger.log_event(
            event="fixtures",
            extra={"table": "staking", "entries": len(validators) + len(delegations)},
        )


def new_simulator(
    contract_balance: Sequence[Coin] = (),
    config: Optional[Dict[str, Any]] = None,
    trace_file: Optional[TextIO] = None,
) -> QuerySimulator:
    """Simulator whose base querier funds the mock contract with contract_balance."""
    config = config if config is not None else load_config()
    base = MockQuerier([(config["querier"]["contract_addr"], list(contract_balance))])
    return QuerySimulator(base, config=config, trace_file=trace_file)
