from nacl.hash import blake2b
from nacl.encoding import RawEncoder

# Could be modified
MIN_ADDRESS_LENGTH = 3
MAX_ADDRESS_LENGTH = 64
CHECKSUM_LENGTH = 4


class AddressError(ValueError):
    pass


def blake2b_hash(data: bytes) -> bytes:
    return blake2b(data, digest_size=32, encoder=RawEncoder)


def _checksum(raw: bytes) -> bytes:
    return blake2b_hash(raw)[:CHECKSUM_LENGTH]


class AddressApi:
    """
    Resolves human readable addresses to canonical bytes and back.

    Canonical form: 1 length byte + utf-8 address + 4 byte BLAKE2b checksum.
    Addresses are compared as exact strings, nothing is case folded.
    """

    def addr_validate(self, human: str) -> str:
        if not isinstance(human, str):
            raise AddressError(f"Invalid input: expected string, got {type(human).__name__}")
        raw = human.encode("utf-8")
        if len(raw) < MIN_ADDRESS_LENGTH:
            raise AddressError("Invalid input: human address too short")
        if len(raw) > MAX_ADDRESS_LENGTH:
            raise AddressError("Invalid input: human address too long")
        return human

    def addr_canonicalize(self, human: str) -> bytes:
        raw = self.addr_validate(human).encode("utf-8")
        return bytes([len(raw)]) + raw + _checksum(raw)

    def addr_humanize(self, canonical: bytes) -> str:
        canonical = bytes(canonical)
        min_len = 1 + MIN_ADDRESS_LENGTH + CHECKSUM_LENGTH
        max_len = 1 + MAX_ADDRESS_LENGTH + CHECKSUM_LENGTH
        if not min_len <= len(canonical) <= max_len:
            raise AddressError("Invalid input: canonical address length not correct")

        size = canonical[0]
        raw = canonical[1:-CHECKSUM_LENGTH]
        if size != len(raw):
            raise AddressError("Invalid input: canonical address length prefix mismatch")
        if canonical[-CHECKSUM_LENGTH:] != _checksum(raw):
            raise AddressError("Invalid input: canonical address checksum mismatch")

        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError as e:
            raise AddressError("Invalid input: canonical address is not valid utf-8") from e
