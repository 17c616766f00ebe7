"""Approval signature integrity hash."""

import hashlib
import hmac
from uuid import UUID


def signature_hash(
    document_id: UUID, actor_id: str, timestamp: str, ip_address: str | None
) -> str:
    """SHA-256 over ``document:actor:timestamp:ip`` (``unknown`` when no IP)."""
    data = f"{document_id}:{actor_id}:{timestamp}:{ip_address or 'unknown'}"
    return hashlib.sha256(data.encode("utf-8")).hexdigest()


def verify_signature_hash(
    document_id: UUID,
    actor_id: str,
    timestamp: str,
    ip_address: str | None,
    expected: str,
) -> bool:
    """Check a stored hash against the attributes it was derived from."""
    return hmac.compare_digest(
        signature_hash(document_id, actor_id, timestamp, ip_address), expected
    )
