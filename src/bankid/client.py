"""BankID relying-party client: authenticate, sign and collect."""

from __future__ import annotations

import logging
from typing import Any, Mapping

import requests
from zeep import Client
from zeep.exceptions import Error as ZeepError
from zeep.exceptions import Fault, ValidationError
from zeep.transports import Transport

from bankid.certificates import get_certificate
from bankid.environments import Environment, resolve_environment
from bankid.errors import BankIDError, ConfigurationError, TransportError
from bankid.text import encode_payload
from bankid.transport import build_policy, build_session
from bankid.types import CallResult, EnvironmentProfile, RequestParams, ResultKind, TransportPolicy

logger = logging.getLogger(__name__)

PERSONAL_NUMBER_KEY = "personalNumber"
VISIBLE_DATA_KEY = "userVisibleData"
HIDDEN_DATA_KEY = "userNonVisibleData"


def _merge_params(extra_options: Mapping[str, Any] | None, **fixed: Any) -> RequestParams:
    params = RequestParams(extra_options or {})
    params.update(fixed)
    return params


class BankIDClient:
    """Secured session to the BankID service.

    Construction never raises for setup failures. A client whose session could
    not be established reports ``ready = False``, keeps the cause in
    ``setup_error`` and answers every operation with a failed result.
    """

    def __init__(
        self,
        certificate: str,
        test: bool = False,
        *,
        environment: Environment | str | None = None,
        certs_dir: str | None = None,
        session: requests.Session | None = None,
        service: Any = None,
        timeout: float | None = None,
    ):
        self.environment = resolve_environment(test=test, environment=environment)
        self.profile: EnvironmentProfile = self.environment.profile
        self.certificate = get_certificate(certificate, certs_dir)
        self.policy: TransportPolicy | None = None
        self.setup_error: BankIDError | None = None
        self._service = None

        try:
            self._service = service if service is not None else self._connect(
                certificate, certs_dir, session, timeout
            )
        except BankIDError as error:
            self.setup_error = error
        except (ZeepError, requests.exceptions.RequestException, OSError) as error:
            self.setup_error = TransportError(
                f"Failed to establish session with {self.profile.wsdl_url}: {error}",
            )

        if self.setup_error is not None:
            logger.error(
                "BankID client setup failed for %s environment: %s",
                self.profile.name,
                self.setup_error,
            )
        else:
            logger.info("Initialized BankID client @ %s", self.profile.api_url)

    def _connect(
        self,
        certificate: str,
        certs_dir: str | None,
        session: requests.Session | None,
        timeout: float | None,
    ) -> Any:
        if self.certificate is None:
            raise ConfigurationError(f"Client certificate {certificate} was not found")

        self.policy = build_policy(self.profile, certs_dir)
        if session is None:
            session = build_session(self.policy, self.certificate)

        transport = Transport(session=session, operation_timeout=timeout)
        zeep_client = Client(self.profile.wsdl_url, transport=transport)
        # The WSDL's own soap:address is ignored in favour of the profile endpoint.
        services = list(zeep_client.wsdl.services.values())
        if not services or not services[0].ports:
            raise TransportError(f"WSDL at {self.profile.wsdl_url} defines no service port")
        port = next(iter(services[0].ports.values()))
        return zeep_client.create_service(port.binding.name.text, self.profile.api_url)

    @property
    def ready(self) -> bool:
        return self._service is not None and self.setup_error is None

    def raise_for_setup(self) -> None:
        if self.setup_error is not None:
            raise self.setup_error

    def _call(self, operation: str, *args: Any, **kwargs: Any) -> CallResult:
        if not self.ready:
            error = self.setup_error or TransportError("BankID client is not connected")
            return CallResult.failure(error.kind, str(error))

        try:
            value = getattr(self._service, operation)(*args, **kwargs)
        except Fault as fault:
            result = CallResult.failure(
                ResultKind.REMOTE_FAULT,
                str(fault.message),
                str(fault.code) if fault.code is not None else None,
            )
        except (ValidationError, TypeError, ValueError) as error:
            # Parameters the operation schema does not accept.
            result = CallResult.failure(ResultKind.CONFIGURATION_ERROR, str(error))
        except (ZeepError, requests.exceptions.RequestException, OSError) as error:
            result = CallResult.failure(ResultKind.TRANSPORT_ERROR, str(error))
        else:
            return CallResult.success(value)

        logger.warning("BankID %s failed (%s): %s", operation, result.kind.value, result.message)
        return result

    def authenticate(
        self,
        personal_id: str,
        extra_options: Mapping[str, Any] | None = None,
    ) -> CallResult:
        params = _merge_params(extra_options, **{PERSONAL_NUMBER_KEY: personal_id})
        return self._call("Authenticate", **params)

    def sign(
        self,
        personal_id: str,
        visible_data: bytes | str,
        hidden_data: bytes | str = b"",
        extra_options: Mapping[str, Any] | None = None,
    ) -> CallResult:
        params = _merge_params(
            extra_options,
            **{
                PERSONAL_NUMBER_KEY: personal_id,
                VISIBLE_DATA_KEY: encode_payload(visible_data),
                HIDDEN_DATA_KEY: encode_payload(hidden_data),
            },
        )
        return self._call("Sign", **params)

    def collect(self, order_reference: str) -> CallResult:
        return self._call("Collect", order_reference)
