"""
Tests for the base querier that answers everything the simulator does not specialize
"""

import sys
from pathlib import Path

import pytest

# Add src to path
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))

from core.types import Coin, FullDelegation, Validator
from harness import MockQuerier
from querier.envelope import NO_SUCH_CONTRACT, UNSUPPORTED_REQUEST
from querier.errors import MalformedRequest
from querier.query import AllBalances, BalanceOf, Delegated, RawRead, SmartCall


@pytest.fixture
def base():
    querier = MockQuerier([("contract", [Coin("uluna", 1000), Coin("uusd", 5)])])
    validators = [
        Validator("val1", "0.05", "0.1", "0.01"),
        Validator("val2", "0.02", "0.2", "0.01"),
    ]
    delegations = [
        FullDelegation("contract", "val1", Coin("uluna", 700), Coin("uluna", 700), [Coin("uluna", 3)]),
        FullDelegation("contract", "val2", Coin("uluna", 300), Coin("uluna", 0)),
        FullDelegation("other", "val1", Coin("uluna", 1), Coin("uluna", 1)),
    ]
    querier.update_staking("uluna", validators, delegations)
    return querier


def test_bank_balance(base):
    """Unknown denoms and accounts hold a zero coin."""
    assert base.handle_query(BalanceOf("contract", "uusd")).unwrap() == {"amount": {"denom": "uusd", "amount": "5"}}
    assert base.handle_query(BalanceOf("contract", "ukrw")).unwrap() == {"amount": {"denom": "ukrw", "amount": "0"}}
    assert base.handle_query(BalanceOf("nobody", "uluna")).unwrap() == {"amount": {"denom": "uluna", "amount": "0"}}


def test_bank_all_balances(base):
    assert base.handle_query(AllBalances("contract")).unwrap() == {
        "amount": [{"denom": "uluna", "amount": "1000"}, {"denom": "uusd", "amount": "5"}]
    }
    assert base.handle_query(AllBalances("nobody")).unwrap() == {"amount": []}


def test_update_balance_replaces_coins(base):
    base.update_balance("contract", [Coin("uluna", 1)])
    assert base.handle_query(AllBalances("contract")).unwrap() == {"amount": [{"denom": "uluna", "amount": "1"}]}


def test_staking_validators(base):
    assert base.handle_query(Delegated("staking", "bonded_denom", {})).unwrap() == {"denom": "uluna"}

    validators = base.handle_query(Delegated("staking", "all_validators", {})).unwrap()
    assert [v["address"] for v in validators["validators"]] == ["val1", "val2"]

    found = base.handle_query(Delegated("staking", "validator", {"address": "val2"})).unwrap()
    assert found == {"validator": {
        "address": "val2",
        "commission": "0.02",
        "max_commission": "0.2",
        "max_change_rate": "0.01",
    }}
    missing = base.handle_query(Delegated("staking", "validator", {"address": "val9"})).unwrap()
    assert missing == {"validator": None}


def test_staking_delegations(base):
    short = base.handle_query(Delegated("staking", "all_delegations", {"delegator": "contract"})).unwrap()
    assert short == {"delegations": [
        {"delegator": "contract", "validator": "val1", "amount": {"denom": "uluna", "amount": "700"}},
        {"delegator": "contract", "validator": "val2", "amount": {"denom": "uluna", "amount": "300"}},
    ]}

    full = base.handle_query(
        Delegated("staking", "delegation", {"delegator": "contract", "validator": "val1"})
    ).unwrap()
    assert full["delegation"]["can_redelegate"] == {"denom": "uluna", "amount": "700"}
    assert full["delegation"]["accumulated_rewards"] == [{"denom": "uluna", "amount": "3"}]

    none = base.handle_query(
        Delegated("staking", "delegation", {"delegator": "other", "validator": "val2"})
    ).unwrap()
    assert none == {"delegation": None}


def test_staking_missing_field_is_malformed(base):
    with pytest.raises(MalformedRequest) as exc_info:
        base.handle_query(Delegated("staking", "delegation", {"delegator": "contract"}))
    assert "validator" in exc_info.value.error


def test_no_contract_is_deployed(base):
    for query in [
        RawRead("token", b"\x00\x06config"),
        SmartCall("token", b'{"token_info":{}}'),
        Delegated("wasm", "contract_info", {"contract_addr": "token"}),
    ]:
        result = base.handle_query(query)
        assert result.failure.kind == NO_SUCH_CONTRACT
        assert result.failure.detail == "token"


def test_custom_queries_are_unsupported(base):
    result = base.handle_query(Delegated("custom", "custom", {"ping": {}}))
    assert result.failure.kind == UNSUPPORTED_REQUEST
    assert result.to_dict() == {"error": {"unsupported_request": {"kind": "custom"}}}
