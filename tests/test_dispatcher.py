import sys
import os
import unittest

# Add src directory to path
sys.path.append(os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "src"))

from core.crypto_layer import AddressApi
from core.types import UINT128_MAX, Coin
from querier.config import QuerierSettings, load_config
from querier.dispatcher import BALANCE_PREFIX, CONFIG_KEY, FALLBACK, Dispatcher
from querier.envelope import encode_ok
from querier.errors import Fatal, MalformedRequest, Unimplemented
from querier.fixtures import FixtureSet, NativeBalanceTable, TokenBalanceTable
from querier.query import AllBalances, BalanceOf, Delegated, RawRead, SmartCall


class TestDispatcher(unittest.TestCase):
    def setUp(self):
        self.api = AddressApi()
        self.settings = QuerierSettings.from_config(load_config(), self.api)
        self.fixtures = FixtureSet(contract_config=self.settings.contract_config)
        self.delegated = []

        def fallback(query):
            self.delegated.append(query)
            return encode_ok({"fallback": True})

        self.dispatcher = Dispatcher(self.fixtures, self.settings, self.api, fallback)

    def test_route_order(self):
        route = self.dispatcher.route
        holder_key = BALANCE_PREFIX + self.api.addr_canonicalize("alice")

        self.assertEqual(route(RawRead("token", CONFIG_KEY)), "raw_config")
        self.assertEqual(route(RawRead("token", holder_key)), "raw_balance")
        self.assertEqual(route(RawRead("token", b"\x00\x05state")), "raw_other")
        self.assertEqual(route(BalanceOf("reward", "uusd")), "bank_balance")
        self.assertEqual(route(AllBalances("reward")), "bank_all_balances")
        self.assertEqual(route(SmartCall("token", b"{}")), "smart")
        self.assertEqual(route(Delegated("staking", "bonded_denom")), FALLBACK)

    def test_config_key_is_exact(self):
        """Only the config key itself is the config read; longer keys are not simulated."""
        self.assertEqual(self.dispatcher.route(RawRead("token", CONFIG_KEY + b"x")), "raw_other")
        with self.assertRaises(Unimplemented):
            self.dispatcher.dispatch(RawRead("token", CONFIG_KEY + b"x"))

    def test_fallback_receives_unspecialized_queries(self):
        query = Delegated("staking", "bonded_denom", {})
        result = self.dispatcher.dispatch(query)

        self.assertEqual(self.delegated, [query])
        self.assertEqual(result.unwrap(), {"fallback": True})

    def test_tables_are_read_at_dispatch_time(self):
        self.fixtures.tokens = TokenBalanceTable.from_pairs([("token", [("alice", 42)])])
        result = self.dispatcher.dispatch(SmartCall("token", b'{"balance":{"address":"alice"}}'))
        self.assertEqual(result.unwrap(), {"balance": "42"})

    def test_reserved_rule_precedes_seeded_table(self):
        self.fixtures.native = NativeBalanceTable.from_pairs([("reward", Coin("uusd", 5))])
        result = self.dispatcher.dispatch(BalanceOf("reward", "uusd"))
        self.assertEqual(result.unwrap(), {"amount": {"denom": "uusd", "amount": "2000"}})

    def test_rule_without_amount_reads_seeded_coin(self):
        contract = self.settings.contract_addr
        self.fixtures.native = NativeBalanceTable.from_pairs([(contract, Coin("uluna", 123))])
        result = self.dispatcher.dispatch(BalanceOf(contract, "uluna"))
        self.assertEqual(result.unwrap(), {"amount": {"denom": "uluna", "amount": "123"}})

    def test_fixture_miss_is_inner_error(self):
        result = self.dispatcher.dispatch(BalanceOf("nobody", "uluna"))

        self.assertTrue(result.is_ok())
        self.assertFalse(result.result.is_ok())
        self.assertEqual(result.result.error, "balance not found")
        self.assertEqual(self.delegated, [])

    def test_malformed_token_payload_propagates(self):
        with self.assertRaises(MalformedRequest):
            self.dispatcher.dispatch(SmartCall("token", b"not json"))

    def test_unsupported_token_query_is_fatal(self):
        self.fixtures.tokens = TokenBalanceTable.from_pairs([("token", [])])
        with self.assertRaises(Fatal):
            self.dispatcher.dispatch(SmartCall("token", b'{"minter":{}}'))

    def test_all_balances_of_unknown_account_is_unimplemented(self):
        with self.assertRaises(NotImplementedError):
            self.dispatcher.dispatch(AllBalances("somebody"))


class TestTokenBalanceTable(unittest.TestCase):
    def test_total_supply_sums_holders(self):
        table = TokenBalanceTable.from_pairs([("token", [("alice", 100), ("bob", 300)]), ("empty", [])])
        self.assertEqual(table.total_supply("token"), 400)
        self.assertEqual(table.total_supply("empty"), 0)
        self.assertEqual(table.total_supply("unseeded"), 0)

    def test_total_supply_is_range_checked(self):
        table = TokenBalanceTable.from_pairs([("token", [("alice", UINT128_MAX), ("bob", 1)])])
        with self.assertRaises(ValueError):
            table.total_supply("token")

    def test_holders_distinguishes_unseeded_from_empty(self):
        table = TokenBalanceTable.from_pairs([("empty", [])])
        self.assertEqual(table.holders("empty"), {})
        self.assertIsNone(table.holders("unseeded"))


if __name__ == "__main__":
    unittest.main()
