"""Host client interface and the OpenCode HTTP implementation."""

import logging
from abc import ABC, abstractmethod
from typing import Any

import httpx

from .core import ModelRef, Part, ProvidersCatalog, SessionInfo

logger = logging.getLogger(__name__)


class HostError(Exception):
    """A failure reported by the host, with its structured payload if any."""

    def __init__(
        self,
        message: str,
        name: str | None = None,
        data: Any = None,
        status_code: int | None = None,
    ):
        super().__init__(message)
        self.name = name
        self.data = data
        self.status_code = status_code


class HostClient(ABC):
    """The slice of the host runtime's API that session renaming needs.

    Implementations raise on failure; callers decide what is recoverable.
    """

    @abstractmethod
    async def providers(self, directory: str) -> ProvidersCatalog:
        """Return the catalog of providers and their models."""
        ...

    @abstractmethod
    async def create_session(self) -> SessionInfo:
        """Create a new, empty session."""
        ...

    async def get_session(self, session_id: str) -> SessionInfo:
        """Return a session's current info.

        Optional capability: hosts that cannot look sessions up leave this
        unimplemented.
        """
        raise NotImplementedError

    @abstractmethod
    async def prompt(
        self,
        session_id: str,
        system: str,
        parts: list[Part],
        model: ModelRef | None = None,
    ) -> list[Part] | None:
        """Send one prompt; return the response parts, or None if it had no data."""
        ...

    @abstractmethod
    async def delete_session(self, session_id: str) -> None:
        ...

    @abstractmethod
    async def update_session(self, session_id: str, title: str) -> None:
        ...

    async def aclose(self) -> None:
        """Release any resources held by the client."""


class OpenCodeClient(HostClient):
    """Talks to a running ``opencode serve`` instance over HTTP."""

    def __init__(
        self,
        base_url: str,
        directory: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.directory = directory
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=httpx.Timeout(timeout),
            transport=transport,
        )

    async def providers(self, directory: str) -> ProvidersCatalog:
        data = await self._request("GET", "/config/providers", directory=directory)
        return ProvidersCatalog.from_dict(data)

    async def create_session(self) -> SessionInfo:
        data = await self._request("POST", "/session", json={})
        return _session_info(data)

    async def get_session(self, session_id: str) -> SessionInfo:
        data = await self._request("GET", f"/session/{session_id}")
        return _session_info(data)

    async def prompt(
        self,
        session_id: str,
        system: str,
        parts: list[Part],
        model: ModelRef | None = None,
    ) -> list[Part] | None:
        body: dict[str, Any] = {
            "system": system,
            "parts": [{"type": p.type, "text": p.text} for p in parts],
        }
        if model:
            body["model"] = model.to_dict()

        data = await self._request("POST", f"/session/{session_id}/message", json=body)
        if not isinstance(data, dict):
            return None

        parts_out = []
        for raw in data.get("parts") or []:
            part = Part.from_dict(raw)
            if part:
                parts_out.append(part)
        return parts_out

    async def delete_session(self, session_id: str) -> None:
        await self._request("DELETE", f"/session/{session_id}")

    async def update_session(self, session_id: str, title: str) -> None:
        await self._request("PATCH", f"/session/{session_id}", json={"title": title})

    async def aclose(self) -> None:
        await self._client.aclose()

    # ── Private helpers ──────────────────────────────────────────────

    async def _request(
        self,
        method: str,
        path: str,
        json: Any = None,
        directory: str | None = None,
    ) -> Any:
        params = {}
        directory = directory or self.directory
        if directory:
            params["directory"] = directory

        try:
            resp = await self._client.request(method, path, params=params, json=json)
        except httpx.HTTPError as e:
            raise HostError(f"{method} {path} failed: {e}") from e

        if resp.is_error:
            raise _error_from_response(method, path, resp)

        if not resp.content:
            return None
        try:
            return resp.json()
        except ValueError:
            logger.debug("Non-JSON response from %s %s", method, path)
            return None


def _session_info(data: Any) -> SessionInfo:
    if not isinstance(data, dict) or not isinstance(data.get("id"), str) or not data["id"]:
        raise HostError("Session response did not include an id")
    title = data.get("title")
    return SessionInfo(id=data["id"], title=title if isinstance(title, str) else None)


def _error_from_response(method: str, path: str, resp: httpx.Response) -> HostError:
    """Turn an error response into a HostError, keeping opencode's ``{name, data}`` body."""
    name = None
    data = None
    message = f"{method} {path} returned {resp.status_code}"
    try:
        body = resp.json()
    except ValueError:
        body = None

    if isinstance(body, dict):
        name = body.get("name") if isinstance(body.get("name"), str) else None
        data = body.get("data")
        detail = body.get("message")
        if not isinstance(detail, str) and isinstance(data, dict):
            detail = data.get("message")
        if isinstance(detail, str) and detail:
            message = f"{message}: {detail}"
        elif name:
            message = f"{message}: {name}"

    return HostError(message, name=name, data=data, status_code=resp.status_code)
