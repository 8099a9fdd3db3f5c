"""Per-session table storage, in Redis when reachable, otherwise in memory."""

import json
import logging
from abc import ABC, abstractmethod
from datetime import datetime, timedelta
from typing import Any
from uuid import uuid4

import redis.asyncio as redis
from itsdangerous import URLSafeTimedSerializer, BadSignature, SignatureExpired

from config import config

logger = logging.getLogger(__name__)

# Session payload: the serialized round plus activity timestamps
SessionData = dict[str, Any]


class SessionSigner:
    """Issue and check session tokens signed with the server's secret key."""

    def __init__(self, secret_key: str | None = None) -> None:
        self._serializer = URLSafeTimedSerializer(secret_key or config.security.secret_key)

    def sign(self, session_id: str) -> str:
        return self._serializer.dumps(session_id)

    def unsign(self, token: str, max_age: int | None = None) -> str | None:
        """
        Return the session id inside a token.

        Args:
            token: Value of the X-Session-ID header
            max_age: Token lifetime in seconds (defaults to session_ttl)

        Returns:
            The session id, or None if the token is forged or expired
        """
        try:
            return self._serializer.loads(token, max_age=max_age or config.session_ttl)
        except (BadSignature, SignatureExpired):
            return None


_session_signer: SessionSigner | None = None


def get_session_signer() -> SessionSigner:
    """Get or create the session signer."""
    global _session_signer
    if _session_signer is None:
        _session_signer = SessionSigner()
    return _session_signer


class SessionStore(ABC):
    """Where each session's round is kept between requests."""

    @abstractmethod
    async def get(self, session_id: str) -> SessionData | None:
        ...

    @abstractmethod
    async def set(self, session_id: str, data: SessionData) -> None:
        """Store the payload; it expires session_ttl seconds later."""
        ...


class InMemorySessionStore(SessionStore):
    """Process-local store used when Redis is not reachable."""

    def __init__(self, ttl: int | None = None) -> None:
        self._ttl = ttl or config.session_ttl
        self._sessions: dict[str, tuple[SessionData, datetime]] = {}

    async def get(self, session_id: str) -> SessionData | None:
        entry = self._sessions.get(session_id)
        if entry is None:
            return None

        data, expiry = entry
        if expiry < datetime.now():
            del self._sessions[session_id]
            return None
        return data

    async def set(self, session_id: str, data: SessionData) -> None:
        self._sessions[session_id] = (data, datetime.now() + timedelta(seconds=self._ttl))


class RedisSessionStore(SessionStore):
    """Redis store; payloads are JSON under a per-session key with a TTL."""

    KEY_PREFIX = "blackjack_table:session:"

    def __init__(self, redis_client: redis.Redis) -> None:
        self._redis = redis_client

    async def get(self, session_id: str) -> SessionData | None:
        raw = await self._redis.get(self.KEY_PREFIX + session_id)
        return None if raw is None else json.loads(raw)

    async def set(self, session_id: str, data: SessionData) -> None:
        await self._redis.setex(self.KEY_PREFIX + session_id, config.session_ttl, json.dumps(data))


_session_store: SessionStore | None = None


async def get_session_store() -> SessionStore:
    """Connect to Redis once, falling back to the in-memory store."""
    global _session_store

    if _session_store is not None:
        return _session_store

    try:
        redis_client = redis.from_url(config.redis.url)
        await redis_client.ping()
        _session_store = RedisSessionStore(redis_client)
        logger.info("Using Redis session store at %s:%s", config.redis.host, config.redis.port)
    except (redis.RedisError, OSError) as e:
        logger.info("Redis unavailable (%s), using in-memory session store", e)
        _session_store = InMemorySessionStore()
    return _session_store


async def create_session(data: SessionData | None = None) -> str:
    """Start a session and return its signed token."""
    store = await get_session_store()
    token = get_session_signer().sign(str(uuid4()))
    await store.set(token, data or {})
    return token


def extract_session_id(token: str) -> str | None:
    """Return the session id in a signed token, or None if it is not valid."""
    return get_session_signer().unsign(token)
