"""Core data models for session-renamer."""

from dataclasses import dataclass, field
from typing import Any, Optional


@dataclass(frozen=True)
class ModelRef:
    """A concrete LLM endpoint known to the host."""

    provider_id: str
    model_id: str

    def __str__(self) -> str:
        return f"{self.provider_id}/{self.model_id}"

    def to_dict(self) -> dict:
        return {"providerID": self.provider_id, "modelID": self.model_id}


@dataclass
class CatalogProvider:
    """One provider entry of the host's catalog."""

    id: str
    models: list[str] = field(default_factory=list)  # declaration order


@dataclass
class ProvidersCatalog:
    """Snapshot of every provider the host exposes, plus per-provider defaults."""

    providers: list[CatalogProvider] = field(default_factory=list)
    default: dict[str, str] = field(default_factory=dict)

    def find(self, provider_id: str) -> CatalogProvider | None:
        for provider in self.providers:
            if provider.id == provider_id:
                return provider
        return None

    @classmethod
    def from_dict(cls, data: Any) -> "ProvidersCatalog":
        """Build a catalog from the host payload, skipping malformed entries."""
        if not isinstance(data, dict):
            return cls()

        providers = []
        providers_raw = data.get("providers")
        for entry in providers_raw if isinstance(providers_raw, list) else []:
            if not isinstance(entry, dict):
                continue
            provider_id = entry.get("id")
            if not isinstance(provider_id, str) or not provider_id:
                continue
            models = entry.get("models") or {}
            model_ids = [m for m in models if isinstance(m, str)] if isinstance(models, dict) else []
            providers.append(CatalogProvider(id=provider_id, models=model_ids))

        default_raw = data.get("default") or {}
        default = {}
        if isinstance(default_raw, dict):
            default = {
                k: v for k, v in default_raw.items()
                if isinstance(k, str) and isinstance(v, str)
            }

        return cls(providers=providers, default=default)


@dataclass
class SessionInfo:
    """The parts of a host session this extension cares about."""

    id: str
    title: Optional[str] = None


@dataclass
class Part:
    """A content part of a message or prompt response."""

    type: str  # "text" | "tool" | "step-start" | ...
    text: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Any) -> "Part | None":
        if not isinstance(data, dict) or not isinstance(data.get("type"), str):
            return None
        text = data.get("text")
        return cls(type=data["type"], text=text if isinstance(text, str) else None)


@dataclass
class MessageEvent:
    """A "message completed" callback delivered by the host."""

    session_id: str
    directory: str = ""
    summary_title: Optional[str] = None
    summary_body: Optional[str] = None
    parts: list[Part] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict) -> "MessageEvent":
        """Parse the hook payload ``{sessionID, message, parts, directory}``."""
        session_id = data.get("sessionID")
        if not isinstance(session_id, str) or not session_id:
            raise ValueError("sessionID is required")

        message = data.get("message") or {}
        summary = message.get("summary") if isinstance(message, dict) else None
        if not isinstance(summary, dict):
            summary = {}

        parts_raw = data.get("parts")
        if not isinstance(parts_raw, list):
            parts_raw = []

        parts = []
        for raw in parts_raw:
            part = Part.from_dict(raw)
            if part:
                parts.append(part)

        directory = data.get("directory")
        return cls(
            session_id=session_id,
            directory=directory if isinstance(directory, str) else "",
            summary_title=summary.get("title") if isinstance(summary.get("title"), str) else None,
            summary_body=summary.get("body") if isinstance(summary.get("body"), str) else None,
            parts=parts,
        )
