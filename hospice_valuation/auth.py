"""Signed session tokens and the password gate in front of the calculator."""

from __future__ import annotations

import base64
import hashlib
import hmac
import json
import os
import secrets


PASSWORD_ENV_VAR = "HOSPICE_AUTH_PASSWORD"
SECRET_ENV_VAR = "HOSPICE_AUTH_SECRET"
LEGACY_SUBJECT = "admin"


class Unauthorized(Exception):
    """Raised when a caller's credential does not verify."""


def configured_password() -> str:
    return os.getenv(PASSWORD_ENV_VAR, "").strip()


def configured_secret() -> str:
    return os.getenv(SECRET_ENV_VAR, "").strip() or configured_password()


def _digest(text: str) -> bytes:
    return hashlib.sha256(text.encode("utf-8")).digest()


def check_password(submitted: str, expected: str) -> bool:
    """Constant-time comparison on hashes so length differences don't leak."""
    if not expected:
        return False
    return hmac.compare_digest(_digest(submitted or ""), _digest(expected))


def _sign(payload: str, secret: str) -> str:
    return hmac.new(secret.encode("utf-8"), payload.encode("utf-8"), hashlib.sha256).hexdigest()


def issue_token(subject: str, secret: str) -> str:
    body = json.dumps({"sub": subject, "nonce": secrets.token_hex(8)}, separators=(",", ":"))
    payload = base64.urlsafe_b64encode(body.encode("utf-8")).decode("ascii").rstrip("=")
    return f"{payload}.{_sign(payload, secret)}"


def verify_token(token: str | None, secret: str) -> str | None:
    """Return the token subject, or None when the token is missing or forged.

    Tokens whose payload is not base64 JSON (older opaque tokens) still verify
    and are treated as the admin subject.
    """
    if not token or not secret:
        return None
    payload, sep, signature = token.rpartition(".")
    if not sep or not payload or not signature:
        return None
    if not hmac.compare_digest(_digest(signature), _digest(_sign(payload, secret))):
        return None
    try:
        padded = payload + "=" * (-len(payload) % 4)
        data = json.loads(base64.urlsafe_b64decode(padded.encode("ascii")))
    except (ValueError, UnicodeDecodeError):
        return LEGACY_SUBJECT
    if not isinstance(data, dict):
        return LEGACY_SUBJECT
    return str(data.get("sub") or "unknown")


def require_subject(token: str | None, secret: str) -> str:
    subject = verify_token(token, secret)
    if subject is None:
        raise Unauthorized("Unauthorized")
    return subject
