"""Deterministic idempotency keys for notification submissions."""

import hashlib
import json
from typing import Any


class IdempotencyKeyBuilder:
    """Derive store keys from the fields that identify a submission.

    Components are canonicalized as sorted JSON before hashing, so argument
    order does not matter and ``("a|b", "c")`` cannot collide with
    ``("a", "b|c")``. ``None`` components are left out.

    Example:
        >>> builder = IdempotencyKeyBuilder(namespace="idempotency")
        >>> builder.build(
        ...     "send",
        ...     user_id="u-1",
        ...     channel="email",
        ...     template_code="welcome",
        ...     request_id="r1",
        ... )  # doctest: +SKIP
        'idempotency:send:3f1c0b9a2d4e5f60'
    """

    def __init__(self, namespace: str, digest_length: int = 16):
        if not 8 <= digest_length <= 64:
            raise ValueError("digest_length must be between 8 and 64")
        self.namespace = namespace
        self.digest_length = digest_length

    def build(self, operation: str, **components: Any) -> str:
        canonical = json.dumps(
            {k: v for k, v in components.items() if v is not None},
            sort_keys=True,
            separators=(",", ":"),
            default=str,
        )
        digest = hashlib.sha256(
            f"{self.namespace}:{operation}:{canonical}".encode("utf-8")
        ).hexdigest()
        return f"{self.namespace}:{operation}:{digest[: self.digest_length]}"
