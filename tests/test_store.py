import pytest
from pydantic import ValidationError

from interview.core.store import InMemorySessionStore, Message
from interview.errors import SessionNotFound


SYSTEM = Message(role="system", content="You are an interviewer.")


class TestInMemorySessionStore:
    def test_create_then_get(self):
        store = InMemorySessionStore()
        store.create("u1", SYSTEM)
        assert store.get("u1") == [SYSTEM]
        assert "u1" in store
        assert len(store) == 1

    def test_create_overwrites_previous_transcript(self):
        store = InMemorySessionStore()
        store.create("u1", SYSTEM)
        store.append("u1", Message(role="assistant", content="Q1"))
        fresh = Message(role="system", content="Second start")
        store.create("u1", fresh)
        assert store.get("u1") == [fresh]

    def test_get_unknown_user(self):
        with pytest.raises(SessionNotFound):
            InMemorySessionStore().get("nobody")

    def test_append_keeps_order(self):
        store = InMemorySessionStore()
        store.create("u1", SYSTEM)
        store.append("u1", Message(role="assistant", content="Q1"))
        store.append("u1", Message(role="user", content="A1"))
        assert [m.content for m in store.get("u1")] == [SYSTEM.content, "Q1", "A1"]

    def test_append_unknown_user(self):
        store = InMemorySessionStore()
        with pytest.raises(SessionNotFound):
            store.append("nobody", Message(role="user", content="hi"))
        assert "nobody" not in store

    def test_get_returns_copy(self):
        store = InMemorySessionStore()
        store.create("u1", SYSTEM)
        store.get("u1").append(Message(role="user", content="sneaky"))
        assert len(store.get("u1")) == 1

    def test_remove_is_noop_when_absent(self):
        store = InMemorySessionStore()
        store.remove("nobody")
        store.create("u1", SYSTEM)
        store.remove("u1")
        store.remove("u1")
        assert "u1" not in store

    def test_messages_are_immutable(self):
        with pytest.raises(ValidationError):
            SYSTEM.content = "changed"

    def test_rejects_unknown_message_role(self):
        with pytest.raises(ValidationError):
            Message(role="tool", content="x")

    def test_lock_for_user_without_session_is_dropped(self):
        store = InMemorySessionStore()
        with store.lock("ghost"):
            assert "ghost" in store._user_locks
        assert store._user_locks == {}

    def test_lock_kept_while_session_exists(self):
        store = InMemorySessionStore()
        with store.lock("u1"):
            store.create("u1", SYSTEM)
        assert "u1" in store._user_locks
        with store.lock("u1"):
            store.remove("u1")
        assert store._user_locks == {}

    def test_lock_released_when_body_raises(self):
        store = InMemorySessionStore()
        with pytest.raises(SessionNotFound):
            with store.lock("ghost"):
                store.get("ghost")
        assert store._user_locks == {}
