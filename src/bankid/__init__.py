"""BankID relying-party client: pinned mutual TLS, authenticate, sign and collect."""

from bankid.certificates import DEFAULT_CERTS_DIR, get_certificate, get_certs_dir
from bankid.client import BankIDClient
from bankid.environments import PRODUCTION, TEST, Environment, resolve_environment
from bankid.errors import BankIDError, ConfigurationError, TransportError
from bankid.text import encode_payload, normalize_text
from bankid.types import CallResult, EnvironmentProfile, ResultKind, TransportPolicy

__all__ = [
    "DEFAULT_CERTS_DIR",
    "PRODUCTION",
    "TEST",
    "BankIDClient",
    "BankIDError",
    "CallResult",
    "ConfigurationError",
    "Environment",
    "EnvironmentProfile",
    "ResultKind",
    "TransportError",
    "TransportPolicy",
    "encode_payload",
    "get_certificate",
    "get_certs_dir",
    "normalize_text",
    "resolve_environment",
]

__version__ = "0.0.1"
