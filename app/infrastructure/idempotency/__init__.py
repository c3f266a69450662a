"""Idempotency key generation.

Reservations themselves live in the key-value store (see
``infrastructure.persistence``); this package only derives the keys.

Usage:

    from infrastructure.idempotency import IdempotencyKeyBuilder

    key = IdempotencyKeyBuilder("idempotency").build("send", request_id="r1")
"""

from infrastructure.idempotency.key_builder import IdempotencyKeyBuilder

__all__ = ["IdempotencyKeyBuilder"]
