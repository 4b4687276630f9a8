from __future__ import annotations

import uuid

IDEMPOTENCY_HEADER = "Idempotency-Key"


def new_idempotency_key(operation: str) -> str:
    return f"{operation}-{uuid.uuid4()}"


def idempotency_headers(key: str) -> dict[str, str]:
    return {IDEMPOTENCY_HEADER: key}
