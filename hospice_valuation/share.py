"""Shareable-link codec: inputs to and from a URL-safe ``?v=`` parameter."""

from __future__ import annotations

import base64
import binascii
import json
from datetime import datetime, timezone
from urllib.parse import urlencode, urlsplit, urlunsplit

from hospice_valuation.schema import migrate_inputs, to_wire


SHARE_PARAM = "v"
TIER_KEY = "_tier"
EXPIRES_KEY = "_expires"


def encode_state(inputs: dict, tier: str | None = None, expires_at: str | None = None) -> str:
    payload = to_wire(inputs)
    if tier:
        payload[TIER_KEY] = tier
    if expires_at:
        payload[EXPIRES_KEY] = expires_at
    raw = json.dumps(payload, separators=(",", ":")).encode("utf-8")
    return base64.urlsafe_b64encode(raw).decode("ascii").rstrip("=")


def _decode_payload(text: str) -> dict | None:
    try:
        padded = text.strip() + "=" * (-len(text.strip()) % 4)
        data = json.loads(base64.urlsafe_b64decode(padded.encode("ascii")))
    except (ValueError, binascii.Error, UnicodeError):
        return None
    return data if isinstance(data, dict) else None


def _expired(expires_at, now: datetime) -> bool:
    try:
        moment = datetime.fromisoformat(str(expires_at))
    except ValueError:
        return True
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment <= now


def decode_state(text: str | None, defaults: dict, now: datetime | None = None) -> tuple[dict, str | None]:
    """Decode a share parameter merged over ``defaults``.

    Returns (inputs, tier). Anything undecodable or expired yields the
    defaults unchanged with no tier.
    """
    if not text:
        return dict(defaults), None
    payload = _decode_payload(text)
    if payload is None:
        return dict(defaults), None
    expires_at = payload.pop(EXPIRES_KEY, None)
    tier = payload.pop(TIER_KEY, None)
    if expires_at and _expired(expires_at, now or datetime.now(timezone.utc)):
        return dict(defaults), None
    inputs, _, _ = migrate_inputs(payload, base=defaults)
    return inputs, (str(tier) if tier else None)


def share_url(base_url: str, inputs: dict, tier: str | None = None, expires_at: str | None = None) -> str:
    parts = urlsplit(base_url)
    query = urlencode({SHARE_PARAM: encode_state(inputs, tier=tier, expires_at=expires_at)})
    return urlunsplit((parts.scheme, parts.netloc, parts.path or "/", query, ""))
