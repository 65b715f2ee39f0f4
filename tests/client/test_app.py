"""Tests for client/app.py -- signup, history replay and submission.

前端逻辑测试：后端用内存假对象代替，不发起 HTTP 请求。
"""

from __future__ import annotations

import logging
import random

import httpx
import pytest

from client.app import GoodPlaceApp
from client.layers import LayerStack
from client.state import ClientState
from client.storage import UserStore

CLASSIFICATION = {
    "action": "eating a hamburger",
    "subactions": [],
    "keywords": ["food"],
    "severity": 6,
    "factor": 50,
}


class FakeApi:
    """Stands in for GoodPlaceClient and records what the app sent."""

    def __init__(self, state: ClientState | None = None):
        self.state = state
        self.created: list[str] = []
        self.sent: list[tuple[str, str]] = []
        self.input_during_call: list[bool] = []
        self.history: list[dict] = []
        self.fail_with: Exception | None = None

    def _observe(self):
        if self.state is not None:
            self.input_during_call.append(self.state.input_enabled)
        if self.fail_with is not None:
            raise self.fail_with

    def create_user(self, username: str) -> str:
        self._observe()
        self.created.append(username)
        return "user-1"

    def get_user(self, user_uuid: str) -> dict:
        self._observe()
        return {"id": user_uuid, "username": "alice", "actions": {"results": self.history}}

    def send_action(self, user_uuid: str, message: str) -> dict:
        self._observe()
        self.sent.append((user_uuid, message))
        return dict(CLASSIFICATION, action=message)


@pytest.fixture
def state() -> ClientState:
    return ClientState()


@pytest.fixture
def api(state: ClientState) -> FakeApi:
    return FakeApi(state)


@pytest.fixture
def store(tmp_path) -> UserStore:
    return UserStore(tmp_path / "storage.json")


@pytest.fixture
def sleeps() -> list[float]:
    return []


@pytest.fixture
def app(api, store, state, sleeps) -> GoodPlaceApp:
    return GoodPlaceApp(api, store, state=state, rng=random.Random(3), sleep=sleeps.append)


class TestStartup:

    def test_no_stored_user(self, app: GoodPlaceApp):
        assert app.startup() is False
        assert app.state.welcome_visible is True
        assert app.state.prompt == "Type your username"

    def test_restores_history_newest_on_top(self, app, api, store, sleeps):
        store.save("user-1")
        api.history = [
            dict(CLASSIFICATION, id="a3", action="newest"),
            dict(CLASSIFICATION, id="a2", action="middle"),
            dict(CLASSIFICATION, id="a1", action="oldest"),
        ]

        assert app.startup() is True
        assert app.state.user_uuid == "user-1"
        assert app.state.welcome_visible is False
        assert app.state.prompt == "Type your sin"
        assert [a.action for a in app.state.actions] == ["newest", "middle", "oldest"]
        assert [layer.action.action for layer in app.layers] == ["newest", "middle", "oldest"]
        assert all(not layer.entering for layer in app.layers)
        assert sleeps == [app.replay_delay] * 2

    def test_failed_restore_clears_store(self, app, api, store, caplog):
        store.save("gone")
        api.fail_with = httpx.ConnectError("down")

        with caplog.at_level(logging.ERROR, logger="client.app"):
            assert app.startup() is False
        assert store.load() is None
        assert app.state.user_uuid is None
        assert "Could not restore user gone" in caplog.text


class TestSignup:

    def test_first_submit_creates_user(self, app, api, store):
        assert app.submit("  alice ") is True
        assert api.created == ["alice"]
        assert store.load() == "user-1"
        assert app.state.user_uuid == "user-1"
        assert app.state.welcome_visible is False

    def test_input_disabled_during_call(self, app, api):
        app.submit("alice")
        assert api.input_during_call == [False]
        assert app.state.input_enabled is True

    def test_failure_keeps_user_unset(self, app, api, store):
        api.fail_with = httpx.ConnectError("down")
        assert app.submit("alice") is False
        assert app.state.user_uuid is None
        assert app.state.input_enabled is True
        assert store.load() is None

    def test_blank_input_ignored(self, app, api):
        assert app.submit("   ") is None
        assert api.created == []


class TestSendAction:

    def test_submit_after_signup_sends_action(self, app, api):
        app.submit("alice")
        scored = app.submit("I ate a burger")

        assert api.sent == [("user-1", "I ate a burger")]
        assert scored.action == "I ate a burger"
        assert scored.points < 0
        assert app.state.actions[0] is scored
        assert app.layers.layers[0].action is scored
        assert app.layers.layers[0].entering is True
        assert api.input_during_call == [False, False]
        assert app.state.input_enabled is True

    def test_failure_is_logged_and_input_restored(self, app, api, caplog):
        app.submit("alice")
        api.fail_with = httpx.HTTPStatusError(
            "server error",
            request=httpx.Request("POST", "http://goodplace.test/"),
            response=httpx.Response(500),
        )

        with caplog.at_level(logging.ERROR, logger="client.app"):
            assert app.send_action("I ate a burger") is None
        assert "Error sending action" in caplog.text
        assert app.state.input_enabled is True
        assert len(app.layers) == 0
        assert app.state.actions == []

    def test_requires_user(self, app):
        with pytest.raises(RuntimeError, match="User UUID is missing"):
            app.send_action("I ate a burger")


class TestReset:

    def test_reset_forgets_user(self, app, store):
        app.submit("alice")
        app.submit("I ate a burger")
        app.reset()

        assert store.load() is None
        assert app.state.user_uuid is None
        assert app.state.welcome_visible is True
        assert len(app.layers) == 0


class TestInjectedDependencies:

    def test_empty_layer_stack_is_kept(self, api, store, state):
        stack = LayerStack(rng=random.Random(5))
        app = GoodPlaceApp(api, store, state=state, layers=stack)

        app.submit("alice")
        app.submit("recycling")

        assert app.layers is stack
        assert len(stack) == 1

    def test_injected_state_is_kept(self, api, store):
        state = ClientState()
        assert GoodPlaceApp(api, store, state=state).state is state


class TestSignupBadResponses:
    """Non-JSON or wrongly shaped 2xx bodies are logged, not raised."""

    @pytest.mark.parametrize(
        "error",
        [ValueError("Expecting value: line 1 column 1 (char 0)"), TypeError("list indices")],
    )
    def test_unreadable_body(self, app, api, store, error, caplog):
        api.fail_with = error

        with caplog.at_level(logging.ERROR, logger="client.app"):
            assert app.submit("alice") is False
        assert "Error creating user" in caplog.text
        assert app.state.user_uuid is None
        assert app.state.input_enabled is True
        assert store.load() is None


class TestActionIds:

    def test_ids_unique_across_reset(self, app):
        app.submit("alice")
        first = app.submit("one")
        app.reset()
        app.submit("alice")
        second = app.submit("two")

        assert first.id != second.id
