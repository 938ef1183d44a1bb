"""Mercado Pago webhook signature verification.

The ``x-signature`` header looks like ``ts=1704908010,v1=618c8534...``. ``v1``
is the hex HMAC-SHA256 of the manifest
``id:<data.id>;request-id:<x-request-id>;ts:<ts>;`` keyed with the webhook
secret. Parts whose value is missing are left out of the manifest.
"""

from __future__ import annotations

import hashlib
import hmac


def parse_signature_header(value: str | None) -> tuple[str, str] | None:
    """Return ``(ts, v1)`` from an ``x-signature`` header, or ``None``."""

    if not value:
        return None
    parts: dict[str, str] = {}
    for chunk in value.split(","):
        key, sep, item = chunk.partition("=")
        if sep:
            parts[key.strip().lower()] = item.strip()
    ts = parts.get("ts")
    v1 = parts.get("v1")
    if not ts or not v1:
        return None
    return ts, v1


def build_manifest(*, data_id: str | None, request_id: str | None, ts: str) -> str:
    manifest = ""
    if data_id:
        # Alphanumeric ids are signed in lowercase.
        manifest += f"id:{data_id.lower()};"
    if request_id:
        manifest += f"request-id:{request_id};"
    manifest += f"ts:{ts};"
    return manifest


def compute_signature(secret: str, manifest: str) -> str:
    return hmac.new(secret.encode("utf-8"), manifest.encode("utf-8"), hashlib.sha256).hexdigest()


def verify_signature(
    *,
    secret: str,
    header: str | None,
    data_id: str | None,
    request_id: str | None,
) -> bool:
    parsed = parse_signature_header(header)
    if parsed is None:
        return False
    ts, received = parsed
    manifest = build_manifest(data_id=data_id, request_id=request_id, ts=ts)
    expected = compute_signature(secret, manifest)
    return hmac.compare_digest(expected, received.lower())


__all__ = ["build_manifest", "compute_signature", "parse_signature_header", "verify_signature"]
