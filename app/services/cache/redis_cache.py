from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any

import redis

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CacheGetResult:
    hit: bool
    value: Any | None


class RedisCache:
    def __init__(self, client: redis.Redis):
        self.client = client

    @staticmethod
    def connect(url: str) -> redis.Redis:
        # decode_responses = False -> bytes
        # encoding is managed explicitly
        return redis.Redis.from_url(url, decode_responses=False)

    def ping(self) -> bool:
        return bool(self.client.ping())

    def get_json(self, key: str) -> CacheGetResult:
        try:
            raw = self.client.get(key)
        except redis.RedisError as e:
            logger.warning("cache read failed key=%s err=%s", key, e)
            return CacheGetResult(hit=False, value=None)

        if raw is None:
            return CacheGetResult(hit=False, value=None)

        try:
            return CacheGetResult(hit=True, value=json.loads(raw.decode("utf-8")))
        except (UnicodeDecodeError, json.JSONDecodeError):
            return CacheGetResult(hit=False, value=None)

    def set_json(self, key: str, value: Any, ttl: int) -> None:
        payload = json.dumps(value, ensure_ascii=False).encode("utf-8")
        try:
            self.client.set(key, payload, ex=ttl)
        except redis.RedisError as e:
            logger.warning("cache write failed key=%s err=%s", key, e)
