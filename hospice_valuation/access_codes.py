"""Per-person access codes kept in the local JSON store."""

from __future__ import annotations

import calendar
import re
import secrets
from datetime import datetime, timedelta, timezone

from hospice_valuation import persistence
from hospice_valuation.persistence import ACCESS_CODE_TYPE


_EXPIRY_PATTERN = re.compile(r"^(\d+)(h|d|mo)$")


class AccessCodeError(ValueError):
    """Raised for a malformed request against the access-code store."""


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _add_months(moment: datetime, months: int) -> datetime:
    month_index = moment.month - 1 + months
    year = moment.year + month_index // 12
    month = month_index % 12 + 1
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


def parse_expiry(expires: str | None, now: datetime | None = None) -> str | None:
    """Turn ``24h`` / ``7d`` / ``3mo`` into an ISO timestamp; ``unlimited`` or blank means never."""
    if not expires or expires == "unlimited":
        return None
    match = _EXPIRY_PATTERN.match(expires.strip())
    if not match:
        raise AccessCodeError(f"Unrecognised expiry {expires!r}; use e.g. 24h, 7d, 3mo or unlimited.")
    amount, unit = int(match.group(1)), match.group(2)
    start = now or _now()
    if unit == "h":
        end = start + timedelta(hours=amount)
    elif unit == "d":
        end = start + timedelta(days=amount)
    else:
        end = _add_months(start, amount)
    return end.isoformat()


def generate_code(name: str) -> str:
    prefix = name.split()[0].upper()[:6]
    return f"{prefix}-{secrets.token_hex(3).upper()}"


def create_code(
    name: str,
    email: str | None = None,
    expires: str | None = None,
    code: str | None = None,
    now: datetime | None = None,
) -> dict:
    if not name or not name.strip():
        raise AccessCodeError("Name is required")
    moment = now or _now()
    final_code = (code or "").strip().upper() or generate_code(name.strip())
    record = {
        "name": name.strip(),
        "email": email or None,
        "active": True,
        "created": moment.isoformat(),
        "expires": parse_expiry(expires, moment),
    }
    store = persistence.load_store(ACCESS_CODE_TYPE)
    store[final_code] = record
    persistence.save_store(ACCESS_CODE_TYPE, store)
    return {"code": final_code, **record}


def list_codes() -> list[dict]:
    store = persistence.load_store(ACCESS_CODE_TYPE)
    return [{"code": code, **record} for code, record in sorted(store.items())]


def _is_expired(record: dict, now: datetime) -> bool:
    expires = record.get("expires")
    if not expires:
        return False
    try:
        return datetime.fromisoformat(expires) <= now
    except (TypeError, ValueError):
        return True


def lookup_code(code: str, now: datetime | None = None) -> dict | None:
    """Return the record for an active, unexpired code; otherwise None."""
    key = (code or "").strip().upper()
    record = persistence.load_store(ACCESS_CODE_TYPE).get(key)
    if not record or not record.get("active"):
        return None
    if _is_expired(record, now or _now()):
        return None
    return {"code": key, **record}


def revoke_code(code: str) -> dict:
    key = (code or "").strip().upper()
    if not key:
        raise AccessCodeError("Code is required")
    store = persistence.load_store(ACCESS_CODE_TYPE)
    if key not in store:
        raise AccessCodeError("Code not found")
    store[key]["active"] = False
    persistence.save_store(ACCESS_CODE_TYPE, store)
    return {"code": key, "revoked": True}
