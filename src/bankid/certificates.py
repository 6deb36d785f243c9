"""Certificate lookup for client identities and trust anchors."""

from __future__ import annotations

import os
from pathlib import Path

CERTS_DIR_NAME = "certs"
DEFAULT_CERTS_DIR = str(Path(__file__).resolve().parent / CERTS_DIR_NAME)


def get_certs_dir(explicit_certs_dir: str | None = None) -> str:
    return explicit_certs_dir or os.environ.get("BANKID_CERTS_DIR") or DEFAULT_CERTS_DIR


def get_certificate(name: str, certs_dir: str | None = None) -> str | None:
    """Return the full path of certificate ``name`` or ``None`` if it is not on disk."""
    if not name:
        return None

    cert_path = os.path.join(get_certs_dir(certs_dir), name)
    if os.path.isfile(cert_path):
        return cert_path
    return None
