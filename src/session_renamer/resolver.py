"""Resolve the configured "provider/model" string against the host's catalog.

Precedence favors the user's explicit choice, then the built-in provider,
then any provider with a usable model. When nothing fits, resolution
returns None and the host picks its own default.
"""

import asyncio
import logging

from .client import HostClient
from .core import CatalogProvider, ModelRef, ProvidersCatalog

logger = logging.getLogger(__name__)

BUILTIN_PROVIDER = "opencode"


def parse_model_string(model: str) -> ModelRef:
    """Split "provider/model"; a bare model id belongs to the built-in provider."""
    parts = model.split("/")
    if len(parts) >= 2:
        return ModelRef(provider_id=parts[0], model_id="/".join(parts[1:]))
    return ModelRef(provider_id=BUILTIN_PROVIDER, model_id=model)


def normalize_configured_model(model: str | None) -> ModelRef | None:
    """Return the explicitly requested model, or None if nothing usable was configured."""
    trimmed = (model or "").strip()
    if not trimmed:
        return None

    parts = trimmed.split("/")
    if len(parts) >= 2:
        provider_id = parts[0].strip()
        model_id = "/".join(parts[1:]).strip()
        if not provider_id or not model_id:
            return None
        return ModelRef(provider_id=provider_id, model_id=model_id)

    return parse_model_string(trimmed)


def _provider_model(catalog: ProvidersCatalog, provider: CatalogProvider) -> ModelRef | None:
    """The provider's declared default if listed, else its first listed model."""
    default_model = catalog.default.get(provider.id)
    if default_model and default_model in provider.models:
        return ModelRef(provider_id=provider.id, model_id=default_model)
    if provider.models:
        return ModelRef(provider_id=provider.id, model_id=provider.models[0])
    return None


def _builtin_model(catalog: ProvidersCatalog) -> ModelRef | None:
    provider = catalog.find(BUILTIN_PROVIDER)
    if provider:
        return _provider_model(catalog, provider)
    return None


def resolve_model(
    requested: ModelRef | None, catalog: ProvidersCatalog | None
) -> ModelRef | None:
    """Pick the model to pin the title prompt to, or None for the host default."""
    if catalog is None:
        return requested

    if requested is None:
        resolved = _builtin_model(catalog)
        if resolved:
            return resolved

        for provider in catalog.providers:
            default_model = catalog.default.get(provider.id)
            if default_model and default_model in provider.models:
                return ModelRef(provider_id=provider.id, model_id=default_model)

        for provider in catalog.providers:
            if provider.models:
                return ModelRef(provider_id=provider.id, model_id=provider.models[0])

        return None

    provider = catalog.find(requested.provider_id)
    if provider:
        if requested.model_id in provider.models:
            return requested
        resolved = _provider_model(catalog, provider)
        if resolved:
            return resolved

    return _builtin_model(catalog)


class CatalogCache:
    """Fetches the provider catalog at most once per process.

    The first caller starts the fetch; concurrent callers await the same
    task. A failed fetch is cached as None and never retried.
    """

    def __init__(self, client: HostClient):
        self._client = client
        self._task: asyncio.Task | None = None

    async def get(self, directory: str) -> ProvidersCatalog | None:
        if self._task is None:
            self._task = asyncio.ensure_future(self._fetch(directory))
        return await asyncio.shield(self._task)

    async def _fetch(self, directory: str) -> ProvidersCatalog | None:
        try:
            catalog = await self._client.providers(directory)
        except Exception as e:
            logger.warning("Failed to fetch provider catalog, models will not be validated: %s", e)
            return None
        logger.debug("Fetched provider catalog: %s", [p.id for p in catalog.providers])
        return catalog


class ModelResolver:
    """Resolves the configured model string through the cached catalog."""

    def __init__(self, catalog: CatalogCache):
        self.catalog = catalog

    async def resolve(self, model: str, directory: str) -> ModelRef | None:
        requested = normalize_configured_model(model)
        catalog = await self.catalog.get(directory)
        return resolve_model(requested, catalog)
