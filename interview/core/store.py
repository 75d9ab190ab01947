from __future__ import annotations

"""Per-user interview transcripts.

Transcripts live in process memory only and are lost on restart. The store is
created by the application factory and passed to the service, so tests and
alternative backends can supply their own implementation.
"""

import threading
from contextlib import contextmanager
from typing import ContextManager, Dict, Iterator, List, Literal, Protocol

from pydantic import BaseModel, ConfigDict

from interview.errors import SessionNotFound


class Message(BaseModel):
    model_config = ConfigDict(frozen=True)

    role: Literal["system", "user", "assistant"]
    content: str


class _UserLock:
    __slots__ = ("lock", "holders")

    def __init__(self) -> None:
        self.lock = threading.Lock()
        self.holders = 0


class SessionStore(Protocol):
    def create(self, user_id: str, initial_message: Message) -> None: ...

    def get(self, user_id: str) -> List[Message]: ...

    def append(self, user_id: str, message: Message) -> None: ...

    def remove(self, user_id: str) -> None: ...

    def lock(self, user_id: str) -> ContextManager[None]: ...


class InMemorySessionStore:
    def __init__(self) -> None:
        self._sessions: Dict[str, List[Message]] = {}
        self._guard = threading.Lock()
        self._user_locks: Dict[str, _UserLock] = {}

    def __contains__(self, user_id: object) -> bool:
        return user_id in self._sessions

    def __len__(self) -> int:
        return len(self._sessions)

    def create(self, user_id: str, initial_message: Message) -> None:
        # Last start wins: any previous transcript is discarded.
        with self._guard:
            self._sessions[user_id] = [initial_message]

    def get(self, user_id: str) -> List[Message]:
        with self._guard:
            transcript = self._sessions.get(user_id)
            if transcript is None:
                raise SessionNotFound()
            return list(transcript)

    def append(self, user_id: str, message: Message) -> None:
        with self._guard:
            transcript = self._sessions.get(user_id)
            if transcript is None:
                raise SessionNotFound()
            transcript.append(message)

    def remove(self, user_id: str) -> None:
        with self._guard:
            self._sessions.pop(user_id, None)

    @contextmanager
    def lock(self, user_id: str) -> Iterator[None]:
        """Serialize multi-step updates for one user.

        A user's lock is dropped once no request holds or waits on it and the
        user has no session, so ids without a session leave nothing behind.
        """
        with self._guard:
            entry = self._user_locks.get(user_id)
            if entry is None:
                entry = self._user_locks[user_id] = _UserLock()
            entry.holders += 1
        try:
            with entry.lock:
                yield
        finally:
            with self._guard:
                entry.holders -= 1
                if entry.holders == 0 and user_id not in self._sessions:
                    del self._user_locks[user_id]
