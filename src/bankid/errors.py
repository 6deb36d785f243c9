"""Errors raised while setting up a BankID client."""

from __future__ import annotations

from bankid.types import ResultKind


class BankIDError(Exception):
    kind = ResultKind.TRANSPORT_ERROR


class ConfigurationError(BankIDError):
    """Missing or unusable certificate material."""

    kind = ResultKind.CONFIGURATION_ERROR


class TransportError(BankIDError):
    """The secured session to the remote endpoint could not be established."""

    kind = ResultKind.TRANSPORT_ERROR
