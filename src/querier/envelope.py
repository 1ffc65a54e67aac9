"""
Module Envelope - two layer query result.

Outer layer (SystemResult): was the request itself valid.
Inner layer (ContractResult): did the valid request have an answer.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from core.encoding import (
    CodecError,
    canonical_json,
    to_binary,
    from_binary,
    encode_b64,
    decode_b64,
)
from querier.errors import MalformedRequest, QuerierError

INVALID_REQUEST = "invalid_request"
NO_SUCH_CONTRACT = "no_such_contract"
UNSUPPORTED_REQUEST = "unsupported_request"


@dataclass
class ContractResult:
    value: Optional[bytes] = None
    error: Optional[str] = None

    @staticmethod
    def ok(value: bytes) -> "ContractResult":
        return ContractResult(value=bytes(value))

    @staticmethod
    def err(message: str) -> "ContractResult":
        return ContractResult(error=message)

    def is_ok(self) -> bool:
        return self.error is None

    def to_dict(self) -> dict:
        if self.is_ok():
            return {"ok": encode_b64(self.value)}
        return {"error": self.error}

    @staticmethod
    def from_dict(data: dict) -> "ContractResult":
        if "ok" in data:
            return ContractResult.ok(decode_b64(data["ok"]))
        return ContractResult.err(data["error"])


@dataclass
class SystemFailure:
    kind: str
    error: str = ""
    request: bytes = b""
    detail: str = ""

    @staticmethod
    def invalid_request(error: str, request: bytes) -> "SystemFailure":
        return SystemFailure(INVALID_REQUEST, error=error, request=bytes(request))

    @staticmethod
    def no_such_contract(addr: str) -> "SystemFailure":
        return SystemFailure(NO_SUCH_CONTRACT, error=f"No such contract: {addr}", detail=addr)

    @staticmethod
    def unsupported_request(kind: str) -> "SystemFailure":
        return SystemFailure(UNSUPPORTED_REQUEST, error=f"Unsupported query type: {kind}", detail=kind)

    def to_dict(self) -> dict:
        if self.kind == INVALID_REQUEST:
            body = {"error": self.error, "request": encode_b64(self.request)}
        elif self.kind == NO_SUCH_CONTRACT:
            body = {"addr": self.detail}
        else:
            body = {"kind": self.detail}
        return {self.kind: body}

    @staticmethod
    def from_dict(data: dict) -> "SystemFailure":
        kind, body = next(iter(data.items()))
        if kind == INVALID_REQUEST:
            return SystemFailure.invalid_request(body["error"], decode_b64(body["request"]))
        if kind == NO_SUCH_CONTRACT:
            return SystemFailure.no_such_contract(body["addr"])
        return SystemFailure.unsupported_request(body.get("kind", ""))


@dataclass
class SystemResult:
    result: Optional[ContractResult] = None
    failure: Optional[SystemFailure] = None

    @staticmethod
    def ok(result: ContractResult) -> "SystemResult":
        return SystemResult(result=result)

    @staticmethod
    def err(failure: SystemFailure) -> "SystemResult":
        return SystemResult(failure=failure)

    def is_ok(self) -> bool:
        return self.failure is None

    def to_dict(self) -> dict:
        if self.is_ok():
            return {"ok": self.result.to_dict()}
        return {"error": self.failure.to_dict()}

    def to_bytes(self) -> bytes:
        return canonical_json(self.to_dict())

    @staticmethod
    def from_bytes(data: bytes) -> "SystemResult":
        decoded = from_binary(data)
        if not isinstance(decoded, dict) or len(decoded) != 1:
            raise CodecError("Invalid type: expected query result envelope")
        if "ok" in decoded:
            return SystemResult.ok(ContractResult.from_dict(decoded["ok"]))
        return SystemResult.err(SystemFailure.from_dict(decoded["error"]))

    def unwrap(self) -> Any:
        """Return the decoded inner payload, raising if either layer failed."""
        if not self.is_ok():
            raise QuerierError(f"Querier system error: {self.failure.error}")
        if not self.result.is_ok():
            raise QuerierError(f"Querier contract error: {self.result.error}")
        return from_binary(self.result.value)


def encode_ok(value: Any) -> SystemResult:
    return SystemResult.ok(ContractResult.ok(to_binary(value)))


def encode_not_found(message: str) -> SystemResult:
    return SystemResult.ok(ContractResult.err(message))


def encode_malformed(err: MalformedRequest) -> SystemResult:
    return SystemResult.err(SystemFailure.invalid_request(err.error, err.request))
