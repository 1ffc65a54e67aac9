"""
Module Query - decodes raw request bytes into one of the supported query variants.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Tuple, Union

from core.encoding import CodecError, from_binary, decode_b64
from querier.errors import MalformedRequest


class QueryKind(Enum):
    RAW_READ = "raw_read"
    SMART_CALL = "smart_call"
    BALANCE_OF = "balance_of"
    ALL_BALANCES = "all_balances"
    DELEGATED = "delegated"


@dataclass(frozen=True)
class RawRead:
    """Direct read of a contract storage slot."""
    target: str
    key: bytes

    @property
    def kind(self) -> QueryKind:
        return QueryKind.RAW_READ


@dataclass(frozen=True)
class SmartCall:
    """Contract query; payload is the encoded contract query message."""
    target: str
    payload: bytes

    @property
    def kind(self) -> QueryKind:
        return QueryKind.SMART_CALL


@dataclass(frozen=True)
class BalanceOf:
    account: str
    denom: str

    @property
    def kind(self) -> QueryKind:
        return QueryKind.BALANCE_OF


@dataclass(frozen=True)
class AllBalances:
    account: str

    @property
    def kind(self) -> QueryKind:
        return QueryKind.ALL_BALANCES


@dataclass(frozen=True)
class Delegated:
    """A well-formed query this querier leaves to the base handler."""
    family: str
    name: str
    body: Any = field(default_factory=dict, compare=False)

    @property
    def kind(self) -> QueryKind:
        return QueryKind.DELEGATED


Query = Union[RawRead, SmartCall, BalanceOf, AllBalances, Delegated]


@dataclass(frozen=True)
class TokenInfoQuery:
    pass


@dataclass(frozen=True)
class TokenBalanceQuery:
    address: str


@dataclass(frozen=True)
class UnsupportedTokenQuery:
    name: str


TokenQuery = Union[TokenInfoQuery, TokenBalanceQuery, UnsupportedTokenQuery]

# Request families and the kinds each one accepts
KNOWN_KINDS: Dict[str, Tuple[str, ...]] = {
    "bank": ("balance", "all_balances"),
    "wasm": ("raw", "smart", "contract_info"),
    "staking": ("bonded_denom", "all_validators", "validator", "all_delegations", "delegation"),
}

# Valid cw20 queries that are never simulated
UNSUPPORTED_TOKEN_KINDS = (
    "minter",
    "allowance",
    "all_allowances",
    "all_accounts",
    "marketing_info",
    "download_logo",
)


def _single_key(obj: Any, what: str) -> Tuple[str, Any]:
    if not isinstance(obj, dict):
        raise CodecError(f"Invalid type: expected {what} object, got {type(obj).__name__}")
    if len(obj) != 1:
        raise CodecError(f"Invalid type: {what} must have exactly one variant, got {len(obj)}")
    return next(iter(obj.items()))


def _body(value: Any, variant: str) -> Dict[str, Any]:
    if not isinstance(value, dict):
        raise CodecError(f"Invalid type: expected struct for variant {variant}")
    return value


def str_field(body: Dict[str, Any], name: str) -> str:
    if name not in body:
        raise CodecError(f"missing field `{name}`")
    value = body[name]
    if not isinstance(value, str):
        raise CodecError(f"Invalid type: field `{name}` must be a string")
    return value


def _binary_field(body: Dict[str, Any], name: str) -> bytes:
    if name not in body:
        raise CodecError(f"missing field `{name}`")
    return decode_b64(body[name])


def _classify_request(request: Any) -> Query:
    family, inner = _single_key(request, "query request")

    if family == "custom":
        return Delegated(family, "custom", inner)
    if family not in KNOWN_KINDS:
        raise CodecError(f"unknown variant `{family}`")

    name, value = _single_key(inner, f"{family} query")
    if name not in KNOWN_KINDS[family]:
        raise CodecError(f"unknown variant `{name}` of {family} query")
    body = _body(value, name)

    if family == "wasm" and name == "raw":
        return RawRead(target=str_field(body, "contract_addr"), key=_binary_field(body, "key"))
    if family == "wasm" and name == "smart":
        return SmartCall(target=str_field(body, "contract_addr"), payload=_binary_field(body, "msg"))
    if family == "bank" and name == "balance":
        return BalanceOf(account=str_field(body, "address"), denom=str_field(body, "denom"))
    if family == "bank" and name == "all_balances":
        return AllBalances(account=str_field(body, "address"))
    return Delegated(family, name, body)


def classify(bin_request: bytes) -> Query:
    """
    Decode request bytes into a query variant.

    Raises:
        MalformedRequest: the bytes are not a known request shape
    """
    try:
        return _classify_request(from_binary(bin_request))
    except CodecError as e:
        raise MalformedRequest(f"Parsing query request: {e}", bin_request) from e


def decode_token_query(payload: bytes) -> TokenQuery:
    """Decode the message of a smart call into a token query."""
    try:
        name, value = _single_key(from_binary(payload), "token query")
        if name == "token_info":
            _body(value, name)
            return TokenInfoQuery()
        if name == "balance":
            return TokenBalanceQuery(address=str_field(_body(value, name), "address"))
        if name in UNSUPPORTED_TOKEN_KINDS:
            return UnsupportedTokenQuery(name)
        raise CodecError(f"unknown variant `{name}` of token query")
    except CodecError as e:
        raise MalformedRequest(f"Parsing token query: {e}", payload) from e
