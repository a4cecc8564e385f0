"""Reacts to completed chat messages by titling the session once."""

import asyncio
import logging
from datetime import datetime
from typing import Callable

from .client import HostClient
from .config import RenameConfig
from .core import MessageEvent
from .generator import TitleGenerator
from .resolver import CatalogCache, ModelResolver
from .titles import is_default_title, stamp_title
from .tracker import SessionStateTracker

logger = logging.getLogger(__name__)


def extract_candidate_text(event: MessageEvent) -> str | None:
    """Pick the text to summarize: summary title, summary body, then first text part."""
    if event.summary_title:
        return event.summary_title
    if event.summary_body:
        return event.summary_body
    for part in event.parts:
        if part.type == "text":
            return part.text or None
    return None


class SessionRenamer:
    """Decides whether a session should be titled and runs the titling in the background.

    ``on_message`` returns as soon as the session is claimed; its return does
    not mean the rename has happened. Use ``wait_idle`` to await in-flight
    renames.
    """

    def __init__(
        self,
        client: HostClient,
        config: RenameConfig,
        tracker: SessionStateTracker | None = None,
        resolver: ModelResolver | None = None,
        now: Callable[[], datetime] = datetime.now,
    ):
        self.client = client
        self.config = config
        self.tracker = tracker or SessionStateTracker()
        self.resolver = resolver or ModelResolver(CatalogCache(client))
        self.generator = TitleGenerator(client, config, self.tracker)
        self._now = now
        self._tasks: set[asyncio.Task] = set()

    async def on_message(self, event: MessageEvent) -> None:
        """Handle a "message completed" callback. Never raises."""
        try:
            await self._handle(event)
        except Exception:
            logger.exception("Unexpected error handling message for session %s", event.session_id)

    async def wait_idle(self) -> None:
        """Wait until no rename task is in flight. Does not cancel anything."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    # ── Private helpers ──────────────────────────────────────────────

    async def _handle(self, event: MessageEvent) -> None:
        session_id = event.session_id
        logger.debug("chat.message hook triggered for session: %s", session_id)

        if self.tracker.is_temporary(session_id):
            logger.debug("Temp session, skipping: %s", session_id)
            return
        if self.tracker.is_renamed(session_id):
            logger.debug("Session already renamed, skipping: %s", session_id)
            return
        if self.tracker.is_locked(session_id):
            logger.debug("Session title locked, skipping: %s", session_id)
            return

        if await self._has_own_title(session_id):
            self.tracker.mark_locked(session_id)
            logger.debug("Session already titled, skipping: %s", session_id)
            return

        text = extract_candidate_text(event)
        if not text:
            logger.debug("No content found for title generation")
            return
        if len(text) < self.config.min_message_length:
            logger.debug("Message too short, skipping")
            return

        if not self.tracker.try_claim(session_id):
            logger.debug("Session claimed by another event, skipping: %s", session_id)
            return

        task = asyncio.create_task(self._rename(session_id, text, event.directory))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _has_own_title(self, session_id: str) -> bool:
        try:
            info = await self.client.get_session(session_id)
        except NotImplementedError:
            return False
        except Exception as e:
            logger.debug("Failed to read session title: %s", e)
            return False
        return not is_default_title(info.title)

    async def _rename(self, session_id: str, text: str, directory: str) -> None:
        try:
            model = await self.resolver.resolve(self.config.model, directory)
            if model:
                logger.debug("Using model: %s", model)
            else:
                logger.debug("Using server default model (no explicit model override)")

            title = await self.generator.generate(text, model)
            if not title:
                logger.debug("Failed to generate title for session: %s", session_id)
                self.tracker.release(session_id)
                return

            full_title = stamp_title(title, self.config.date_format, self._now())
            await self.client.update_session(session_id, full_title)
            logger.info("Renamed session %s -> %s", session_id, full_title)
        except Exception:
            logger.exception("Failed to rename session %s", session_id)
            self.tracker.release(session_id)
