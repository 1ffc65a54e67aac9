from dataclasses import dataclass, field
from typing import Dict, Optional, Sequence

from core.crypto_layer import AddressApi
from core.types import Coin
from querier.simulator import QuerySimulator, new_simulator


class MockStorage:
    """In-memory contract storage."""

    def __init__(self):
        self.data: Dict[bytes, bytes] = {}

    def get(self, key: bytes) -> Optional[bytes]:
        return self.data.get(bytes(key))

    def set(self, key: bytes, value: bytes) -> None:
        self.data[bytes(key)] = bytes(value)

    def remove(self, key: bytes) -> None:
        self.data.pop(bytes(key), None)


@dataclass
class OwnedDeps:
    querier: QuerySimulator
    storage: MockStorage = field(default_factory=MockStorage)
    api: AddressApi = field(default_factory=AddressApi)


def mock_dependencies(contract_balance: Sequence[Coin] = (), **kwargs) -> OwnedDeps:
    """
    Storage, address api and querier for one test.

    Args:
        contract_balance: native coins held by the mock contract in the base querier
        kwargs: passed to new_simulator (config, trace_file)
    """
    return OwnedDeps(querier=new_simulator(contract_balance, **kwargs))
