"""Pinned mutual-TLS session used to reach the BankID service."""

from __future__ import annotations

import ssl

import requests
from requests.adapters import HTTPAdapter

from bankid.certificates import get_certificate
from bankid.errors import ConfigurationError
from bankid.types import EnvironmentProfile, TransportPolicy


def build_policy(profile: EnvironmentProfile, certs_dir: str | None = None) -> TransportPolicy:
    trust_anchor = get_certificate(profile.trust_anchor, certs_dir)
    if trust_anchor is None:
        raise ConfigurationError(
            f"Trust anchor {profile.trust_anchor} for the {profile.name} environment was not found",
        )
    return TransportPolicy(trust_anchor=trust_anchor, peer_name=profile.peer_name)


def build_ssl_context(policy: TransportPolicy, client_certificate: str) -> ssl.SSLContext:
    """Create a client context that only trusts ``policy.trust_anchor``.

    Hostname checks are left to urllib3, which matches the peer against
    ``policy.peer_name`` rather than the request host. OpenSSL's default chain
    depth is above ``policy.verify_depth``.
    """
    context = ssl.SSLContext(ssl.PROTOCOL_TLS_CLIENT)
    context.check_hostname = False
    context.verify_mode = ssl.CERT_REQUIRED if policy.verify_peer else ssl.CERT_NONE
    if policy.disable_compression:
        context.options |= ssl.OP_NO_COMPRESSION

    try:
        context.set_ciphers(policy.ciphers)
        context.load_verify_locations(cafile=policy.trust_anchor)
        context.load_cert_chain(certfile=client_certificate)
    except (ssl.SSLError, OSError) as error:
        raise ConfigurationError(f"Failed to load TLS material: {error}") from error

    return context


class PinnedTLSAdapter(HTTPAdapter):
    """Adapter that always verifies against the trust anchor and peer name.

    ``verify`` from the session or the environment (``REQUESTS_CA_BUNDLE``,
    ``CURL_CA_BUNDLE``) is replaced by the trust anchor, so urllib3 never
    loads another CA bundle into the pinned context.
    """

    def __init__(self, ssl_context: ssl.SSLContext, peer_name: str, trust_anchor: str, **kwargs):
        self._ssl_context = ssl_context
        self._peer_name = peer_name
        self._trust_anchor = trust_anchor
        super().__init__(**kwargs)

    def _pin(self, pool_kwargs: dict) -> dict:
        pool_kwargs["ssl_context"] = self._ssl_context
        pool_kwargs["assert_hostname"] = self._peer_name
        return pool_kwargs

    def init_poolmanager(self, connections, maxsize, block=False, **pool_kwargs):
        super().init_poolmanager(connections, maxsize, block=block, **self._pin(pool_kwargs))

    def proxy_manager_for(self, proxy, **proxy_kwargs):
        return super().proxy_manager_for(proxy, **self._pin(proxy_kwargs))

    def send(self, request, stream=False, timeout=None, verify=True, cert=None, proxies=None):
        return super().send(
            request,
            stream=stream,
            timeout=timeout,
            verify=self._trust_anchor,
            cert=cert,
            proxies=proxies,
        )


def build_session(policy: TransportPolicy, client_certificate: str) -> requests.Session:
    context = build_ssl_context(policy, client_certificate)
    session = requests.Session()
    session.trust_env = False
    session.verify = policy.trust_anchor
    session.mount("https://", PinnedTLSAdapter(context, policy.peer_name, policy.trust_anchor))
    return session
