"""Trainer sessions: signed session IDs and an in-process TTL store."""

import logging
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any
from uuid import uuid4

from itsdangerous import URLSafeTimedSerializer, BadSignature, SignatureExpired

from config import config
from core.game import RoundEngine, TrainerMode
from core.statistics import Bankroll, DecisionTracker

logger = logging.getLogger(__name__)

# Session data keys
SESSION_KEY_STATS = "stats"
SESSION_KEY_BANKROLL = "bankroll"
SESSION_KEY_MODE = "mode"
SESSION_KEY_CREATED_AT = "created_at"
SESSION_KEY_LAST_ACTIVITY = "last_activity"


class SessionNotFound(LookupError):
    """The session token is invalid, expired or unknown."""


class SessionSigner:
    """Sign and verify session IDs using itsdangerous."""

    def __init__(self, secret_key: str | None = None) -> None:
        self._serializer = URLSafeTimedSerializer(secret_key or config.security.secret_key)

    def sign(self, session_id: str) -> str:
        """Create a signed token from a session ID."""
        return self._serializer.dumps(session_id)

    def unsign(self, token: str, max_age: int | None = None) -> str | None:
        """
        Verify and extract the session ID from a signed token.

        Args:
            token: The signed token to verify
            max_age: Maximum age in seconds (defaults to session_ttl)

        Returns:
            The session ID if valid, None otherwise
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
    """Abstract store of JSON-compatible session data keyed by raw session ID."""

    @abstractmethod
    async def get(self, session_id: str) -> dict[str, Any] | None:
        """Get session data."""

    @abstractmethod
    async def set(self, session_id: str, data: dict[str, Any], ttl: int | None = None) -> None:
        """Set session data."""

    @abstractmethod
    async def delete(self, session_id: str) -> None:
        """Delete session."""


class InMemorySessionStore(SessionStore):
    """Session store that lives in the server process."""

    def __init__(self) -> None:
        self._sessions: dict[str, tuple[dict[str, Any], datetime]] = {}

    async def get(self, session_id: str) -> dict[str, Any] | None:
        entry = self._sessions.get(session_id)
        if entry is None:
            return None

        data, expiry = entry
        if expiry < datetime.now():
            await self.delete(session_id)
            return None
        return data

    async def set(self, session_id: str, data: dict[str, Any], ttl: int | None = None) -> None:
        expiry = datetime.now() + timedelta(seconds=ttl or config.session_ttl)
        self._sessions[session_id] = (data, expiry)

    async def delete(self, session_id: str) -> None:
        self._sessions.pop(session_id, None)

    async def cleanup_expired(self) -> int:
        """Remove expired sessions."""
        now = datetime.now()
        expired = [sid for sid, (_, expiry) in self._sessions.items() if expiry < now]
        for sid in expired:
            del self._sessions[sid]
        return len(expired)


_session_store: SessionStore | None = None


def get_session_store() -> SessionStore:
    """Get or create the session store."""
    global _session_store
    if _session_store is None:
        _session_store = InMemorySessionStore()
    return _session_store


@dataclass
class TrainerSession:
    """Everything one player needs: a live engine plus their stats, bankroll and mode."""

    engine: RoundEngine
    tracker: DecisionTracker = field(default_factory=DecisionTracker)
    bankroll: Bankroll = field(
        default_factory=lambda: Bankroll.starting_with(config.trainer.starting_bankroll)
    )
    mode: TrainerMode = TrainerMode.LEARNING


# Live engines are kept in memory only; stats, bankroll and mode go to the store
_trainers: dict[str, TrainerSession] = {}


def _new_engine() -> RoundEngine:
    return RoundEngine(rules=config.trainer.rules)


async def create_trainer() -> tuple[str, TrainerSession]:
    """
    Start a new trainer session.

    Returns:
        The signed session token and the session
    """
    await prune_trainers()

    session_id = str(uuid4())
    trainer = TrainerSession(engine=_new_engine())
    _trainers[session_id] = trainer
    await save_trainer(session_id, trainer)
    logger.info("Created trainer session %s", session_id)
    return get_session_signer().sign(session_id), trainer


def resolve_session_id(token: str | None) -> str:
    """Verify a signed token and return the raw session ID."""
    session_id = get_session_signer().unsign(token) if token else None
    if session_id is None:
        raise SessionNotFound("Invalid or expired session")
    return session_id


async def get_trainer(token: str | None) -> tuple[str, TrainerSession]:
    """
    Load the trainer session behind a signed token.

    A session whose engine is no longer cached is rebuilt from the store
    with a fresh engine.

    Raises:
        SessionNotFound: if the token is bad or the session has expired
    """
    session_id = resolve_session_id(token)

    data = await get_session_store().get(session_id)
    if data is None:
        _trainers.pop(session_id, None)
        raise SessionNotFound("Invalid or expired session")

    trainer = _trainers.get(session_id)
    if trainer is None:
        trainer = TrainerSession(
            engine=_new_engine(),
            tracker=DecisionTracker.from_dict(data.get(SESSION_KEY_STATS, {})),
            bankroll=Bankroll.from_dict(data[SESSION_KEY_BANKROLL])
            if SESSION_KEY_BANKROLL in data
            else Bankroll.starting_with(config.trainer.starting_bankroll),
            mode=TrainerMode(data.get(SESSION_KEY_MODE, TrainerMode.LEARNING.value)),
        )
        _trainers[session_id] = trainer

    return session_id, trainer


async def save_trainer(session_id: str, trainer: TrainerSession) -> None:
    """Write a session's stats, bankroll and mode to the store."""
    store = get_session_store()
    data = await store.get(session_id) or {}
    now = int(time.time())
    data[SESSION_KEY_STATS] = trainer.tracker.to_dict()
    data[SESSION_KEY_BANKROLL] = trainer.bankroll.to_dict()
    data[SESSION_KEY_MODE] = trainer.mode.value
    data[SESSION_KEY_LAST_ACTIVITY] = now
    data.setdefault(SESSION_KEY_CREATED_AT, now)
    await store.set(session_id, data)


async def prune_trainers() -> int:
    """
    Drop cached engines whose sessions have expired from the store.

    Returns:
        Number of engines dropped
    """
    store = get_session_store()
    expired = [sid for sid in list(_trainers) if await store.get(sid) is None]
    for sid in expired:
        _trainers.pop(sid, None)
    if expired:
        logger.info("Dropped %d expired trainer sessions", len(expired))
    return len(expired)


def forget_cached_trainers() -> None:
    """Drop every cached engine; sessions survive in the store."""
    _trainers.clear()
