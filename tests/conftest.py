"""Shared test fixtures for session-renamer."""

import itertools
from datetime import datetime

import pytest

from session_renamer.client import HostClient, HostError
from session_renamer.config import RenameConfig
from session_renamer.core import ModelRef, Part, ProvidersCatalog, SessionInfo


class FakeHostClient(HostClient):
    """In-memory host that records every call.

    Failures are injected by setting the ``*_error`` attributes; ``prompt_errors``
    is consumed one entry per prompt call (None means succeed).
    """

    def __init__(self, catalog=None, reply="Fix login bug"):
        self.catalog = catalog
        self.catalog_error: Exception | None = None
        self.reply: str | None = reply
        self.response_parts: list[Part] | None = None
        self.titles: dict[str, str] = {}
        self.create_error: Exception | None = None
        self.get_error: Exception | None = None
        self.delete_error: Exception | None = None
        self.update_error: Exception | None = None
        self.prompt_errors: list[Exception | None] = []
        self.provider_calls = 0
        self.created: list[str] = []
        self.deleted: list[str] = []
        self.prompts: list[dict] = []
        self.updates: list[tuple[str, str]] = []
        self._ids = itertools.count(1)

    async def providers(self, directory: str) -> ProvidersCatalog:
        self.provider_calls += 1
        if self.catalog_error:
            raise self.catalog_error
        return ProvidersCatalog.from_dict(self.catalog)

    async def create_session(self) -> SessionInfo:
        if self.create_error:
            raise self.create_error
        session_id = f"ses_tmp_{next(self._ids)}"
        self.created.append(session_id)
        return SessionInfo(id=session_id)

    async def get_session(self, session_id: str) -> SessionInfo:
        if self.get_error:
            raise self.get_error
        return SessionInfo(id=session_id, title=self.titles.get(session_id))

    async def prompt(self, session_id, system, parts, model=None):
        self.prompts.append({"session_id": session_id, "system": system, "parts": parts, "model": model})
        if self.prompt_errors:
            error = self.prompt_errors.pop(0)
            if error:
                raise error
        if self.response_parts is not None:
            return self.response_parts
        if self.reply is None:
            return None
        return [Part(type="step-start"), Part(type="text", text=self.reply)]

    async def delete_session(self, session_id: str) -> None:
        self.deleted.append(session_id)
        if self.delete_error:
            raise self.delete_error

    async def update_session(self, session_id: str, title: str) -> None:
        if self.update_error:
            raise self.update_error
        self.titles[session_id] = title
        self.updates.append((session_id, title))


class NoLookupHostClient(FakeHostClient):
    """A host without the optional session lookup capability."""

    async def get_session(self, session_id: str) -> SessionInfo:
        return await HostClient.get_session(self, session_id)


def model_not_found() -> HostError:
    return HostError(
        "POST /session/x/message returned 400",
        name="ProviderModelNotFoundError",
        data={"providerID": "anthropic", "modelID": "claude-3-5-haiku-latest"},
        status_code=400,
    )


@pytest.fixture
def catalog_payload():
    """A catalog with only the built-in provider."""
    return {
        "providers": [{"id": "opencode", "models": {"grok-code": {}, "grok-fast": {}}}],
        "default": {"opencode": "grok-code"},
    }


@pytest.fixture
def multi_catalog_payload():
    """A catalog without the built-in provider."""
    return {
        "providers": [
            {"id": "empty", "models": {}},
            {"id": "openai", "models": {"gpt-4o-mini": {}, "gpt-4o": {}}},
            {"id": "anthropic", "models": {"claude-3-5-haiku-latest": {}, "claude-sonnet-4": {}}},
        ],
        "default": {"openai": "gpt-5", "anthropic": "claude-sonnet-4"},
    }


@pytest.fixture
def host(catalog_payload):
    return FakeHostClient(catalog=catalog_payload)


@pytest.fixture
def config():
    return RenameConfig()


@pytest.fixture
def fixed_now():
    return datetime(2026, 1, 14, 11, 30)


@pytest.fixture
def grok():
    return ModelRef(provider_id="opencode", model_id="grok-code")
