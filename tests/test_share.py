from __future__ import annotations

import base64
import json
from datetime import datetime, timezone
from urllib.parse import parse_qs, urlsplit

from hospice_valuation.defaults import DEFAULTS
from hospice_valuation.share import decode_state, encode_state, share_url


def test_encoded_state_restores_inputs(base_inputs):
    changed = {**base_inputs, "yearly_adc": 61.5, "con_state": True, "override_sde": "5.75"}
    inputs, tier = decode_state(encode_state(changed), DEFAULTS)
    assert inputs["yearly_adc"] == 61.5
    assert inputs["con_state"] is True
    assert inputs["override_sde"] == "5.75"
    assert tier is None


def test_encoded_state_is_url_safe(base_inputs):
    text = encode_state(base_inputs, tier="viewer")
    assert "=" not in text and "+" not in text and "/" not in text
    assert decode_state(text, DEFAULTS)[1] == "viewer"


def test_garbage_falls_back_to_defaults():
    for text in ("not base64 !!", "bm90IGpzb24", "WzEsMl0"):
        inputs, tier = decode_state(text, DEFAULTS)
        assert inputs == DEFAULTS
        assert tier is None


def test_expired_state_falls_back_to_defaults(base_inputs):
    text = encode_state({**base_inputs, "yearly_adc": 99.0}, expires_at="2026-01-01T00:00:00+00:00")
    before = datetime(2025, 12, 31, tzinfo=timezone.utc)
    after = datetime(2026, 1, 2, tzinfo=timezone.utc)
    assert decode_state(text, DEFAULTS, now=before)[0]["yearly_adc"] == 99.0
    assert decode_state(text, DEFAULTS, now=after)[0] == DEFAULTS


def test_share_url_carries_v_param(base_inputs):
    url = share_url("https://calc.example.com/app", base_inputs)
    parts = urlsplit(url)
    assert parts.path == "/app"
    encoded = parse_qs(parts.query)["v"][0]
    assert decode_state(encoded, DEFAULTS)[0]["yearly_adc"] == base_inputs["yearly_adc"]


def test_non_finite_count_in_link_falls_back_to_defaults():
    payload = json.dumps({"yearlyAdc": 48, "viableAds": "Infinity"}).encode("utf-8")
    text = base64.urlsafe_b64encode(payload).decode("ascii").rstrip("=")
    inputs, _ = decode_state(text, DEFAULTS)
    assert inputs["yearly_adc"] == 48.0
    assert inputs["viable_ads"] == DEFAULTS["viable_ads"]
