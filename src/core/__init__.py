from .encoding import (
    CodecError,
    canonical_json,
    to_binary,
    from_binary,
    encode_b64,
    decode_b64,
    to_length_prefixed,
)
from .crypto_layer import AddressApi, AddressError, blake2b_hash as hash
from .types import (
    Coin,
    BalanceResponse,
    AllBalanceResponse,
    TokenBalanceResponse,
    MinterData,
    TokenInfoResponse,
    ContractConfig,
    Validator,
    Delegation,
    FullDelegation,
)

__all__ = [
    "CodecError",
    "canonical_json",
    "to_binary",
    "from_binary",
    "encode_b64",
    "decode_b64",
    "to_length_prefixed",
    "AddressApi",
    "AddressError",
    "hash",
    "Coin",
    "BalanceResponse",
    "AllBalanceResponse",
    "TokenBalanceResponse",
    "MinterData",
    "TokenInfoResponse",
    "ContractConfig",
    "Validator",
    "Delegation",
    "FullDelegation",
]
