"""Shared datatypes for the BankID client."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


@dataclass(frozen=True)
class EnvironmentProfile:
    name: str
    api_url: str
    wsdl_url: str
    trust_anchor: str
    peer_name: str


@dataclass(frozen=True)
class TransportPolicy:
    """TLS requirements for the session.

    ``verify_depth`` and ``sni_enabled`` are informational: the ``ssl`` module
    has no depth setter and OpenSSL's default limit is higher, and SNI is
    always sent for the request host.
    """

    trust_anchor: str
    peer_name: str
    verify_peer: bool = True
    verify_depth: int = 5
    disable_compression: bool = True
    sni_enabled: bool = True
    ciphers: str = "ALL:!EXPORT:!EXPORT40:!EXPORT56:!aNULL:!LOW:!RC4"


class ResultKind(str, Enum):
    SUCCESS = "success"
    CONFIGURATION_ERROR = "configuration_error"
    TRANSPORT_ERROR = "transport_error"
    REMOTE_FAULT = "remote_fault"


@dataclass(frozen=True)
class CallResult:
    """Outcome of one remote call.

    ``value`` holds the remote response verbatim on success and is ``None``
    for every failure kind.
    """

    kind: ResultKind
    value: Any = None
    message: str | None = None
    code: str | None = None

    @property
    def ok(self) -> bool:
        return self.kind is ResultKind.SUCCESS

    def __bool__(self) -> bool:
        return self.ok

    @classmethod
    def success(cls, value: Any) -> "CallResult":
        return cls(kind=ResultKind.SUCCESS, value=value)

    @classmethod
    def failure(cls, kind: ResultKind, message: str, code: str | None = None) -> "CallResult":
        if kind is ResultKind.SUCCESS:
            raise ValueError("failure() requires a non-success kind")
        return cls(kind=kind, value=None, message=message, code=code)


class RequestParams(dict[str, Any]):
    """Named parameters sent to a remote operation."""
