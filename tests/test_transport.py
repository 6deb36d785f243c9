from __future__ import annotations

import ssl
from pathlib import Path

import pytest
import requests
from requests.adapters import HTTPAdapter

import bankid.transport as transport_module
from bankid.environments import PRODUCTION, TEST
from bankid.errors import ConfigurationError
from bankid.transport import PinnedTLSAdapter, build_policy, build_session, build_ssl_context


def test_build_policy_pins_selected_trust_anchor(tmp_path: Path) -> None:
    (tmp_path / TEST.trust_anchor).write_text("anchor", encoding="utf-8")

    policy = build_policy(TEST, certs_dir=str(tmp_path))

    assert policy.trust_anchor == str(tmp_path / TEST.trust_anchor)
    assert policy.peer_name == TEST.peer_name
    assert policy.verify_peer is True
    assert policy.verify_depth >= 5
    assert policy.disable_compression is True
    assert policy.sni_enabled is True
    for excluded in ("!EXPORT", "!aNULL", "!LOW", "!RC4"):
        assert excluded in policy.ciphers


def test_build_policy_requires_trust_anchor(tmp_path: Path) -> None:
    (tmp_path / TEST.trust_anchor).write_text("anchor", encoding="utf-8")

    with pytest.raises(ConfigurationError) as excinfo:
        build_policy(PRODUCTION, certs_dir=str(tmp_path))
    assert PRODUCTION.trust_anchor in str(excinfo.value)


def test_build_ssl_context_rejects_unusable_trust_anchor(tmp_path: Path) -> None:
    (tmp_path / TEST.trust_anchor).write_text("not a certificate", encoding="utf-8")
    client_cert = tmp_path / "rp.pem"
    client_cert.write_text("not a certificate either", encoding="utf-8")
    policy = build_policy(TEST, certs_dir=str(tmp_path))

    with pytest.raises(ConfigurationError):
        build_ssl_context(policy, str(client_cert))


def test_pinned_adapter_passes_context_and_peer_name_to_pools() -> None:
    context = ssl.SSLContext(ssl.PROTOCOL_TLS_CLIENT)

    adapter = PinnedTLSAdapter(context, TEST.peer_name, "/certs/anchor.pem")

    assert adapter.poolmanager.connection_pool_kw["ssl_context"] is context
    assert adapter.poolmanager.connection_pool_kw["assert_hostname"] == TEST.peer_name


def test_pinned_adapter_always_verifies_against_trust_anchor(monkeypatch) -> None:
    captured: dict[str, object] = {}

    def fake_send(self, request, stream=False, timeout=None, verify=True, cert=None, proxies=None):
        captured["verify"] = verify
        return "response"

    monkeypatch.setattr(HTTPAdapter, "send", fake_send)
    adapter = PinnedTLSAdapter(ssl.SSLContext(ssl.PROTOCOL_TLS_CLIENT), TEST.peer_name, "/certs/anchor.pem")
    request = requests.Request("GET", TEST.wsdl_url).prepare()

    assert adapter.send(request, verify="/etc/ssl/other-ca.pem") == "response"
    assert captured["verify"] == "/certs/anchor.pem"


def test_build_session_ignores_ca_bundle_environment(tmp_path: Path, monkeypatch) -> None:
    (tmp_path / TEST.trust_anchor).write_text("anchor", encoding="utf-8")
    other_ca = tmp_path / "other-ca.pem"
    other_ca.write_text("other", encoding="utf-8")
    policy = build_policy(TEST, certs_dir=str(tmp_path))
    monkeypatch.setattr(
        transport_module,
        "build_ssl_context",
        lambda policy, client_certificate: ssl.SSLContext(ssl.PROTOCOL_TLS_CLIENT),
    )
    monkeypatch.setenv("REQUESTS_CA_BUNDLE", str(other_ca))
    monkeypatch.setenv("CURL_CA_BUNDLE", str(other_ca))

    session = build_session(policy, str(tmp_path / "rp.pem"))
    settings = session.merge_environment_settings(TEST.wsdl_url, {}, None, None, None)

    assert session.trust_env is False
    assert settings["verify"] == policy.trust_anchor
    assert isinstance(session.get_adapter(TEST.wsdl_url), PinnedTLSAdapter)
