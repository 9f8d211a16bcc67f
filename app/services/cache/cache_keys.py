from __future__ import annotations

import hashlib
import json
from typing import Any

from app.core.config import settings


def sha256_hex(s: str) -> str:
    return hashlib.sha256((s or "").encode("utf-8")).hexdigest()


def canonical_json(payload: Any) -> str:
    """
    Same request -> same string, regardless of key order in the body.
    """
    return json.dumps(payload, sort_keys=True, separators=(",", ":"), ensure_ascii=False)


def resolve_key(payload: Any) -> str:
    return f"resolve:{settings.RESOLVER_VERSION}:{sha256_hex(canonical_json(payload))}"
