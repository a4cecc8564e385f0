"""Title generation through a throwaway host session."""

import logging

from .client import HostClient
from .config import RenameConfig
from .core import ModelRef, Part
from .titles import USER_PROMPT, build_system_prompt, truncate_title
from .tracker import SessionStateTracker

logger = logging.getLogger(__name__)


def is_model_not_found_error(error: BaseException) -> bool:
    """Return True if the host rejected the requested provider/model."""
    name = getattr(error, "name", None)
    if isinstance(name, str) and "modelnotfound" in name.lower():
        return True

    if "modelnotfound" in str(error).lower():
        return True

    data = getattr(error, "data", None)
    if isinstance(data, dict):
        return isinstance(data.get("providerID"), str) and isinstance(data.get("modelID"), str)

    return False


class TitleGenerator:
    """Asks the host's model for a title inside a scratch session.

    The scratch session is marked temporary as soon as it exists so the
    renamer ignores any events the host routes for it, and it is deleted
    on every exit path.
    """

    def __init__(self, client: HostClient, config: RenameConfig, tracker: SessionStateTracker):
        self.client = client
        self.config = config
        self.tracker = tracker

    async def generate(self, source_text: str, model: ModelRef | None = None) -> str | None:
        """Return a title for ``source_text``, or None if none could be produced."""
        try:
            scratch = await self.client.create_session()
        except Exception:
            logger.exception("Failed to create temp session")
            return None

        self.tracker.mark_temporary(scratch.id)

        try:
            return await self._prompt_for_title(scratch.id, source_text, model)
        except Exception:
            logger.exception("Failed to generate title")
            return None
        finally:
            try:
                await self.client.delete_session(scratch.id)
            except Exception as e:
                logger.debug("Failed to delete temp session %s: %s", scratch.id, e)

    async def _prompt_for_title(
        self, scratch_id: str, source_text: str, model: ModelRef | None
    ) -> str | None:
        system = build_system_prompt(self.config.title_max_length)
        parts = [Part(type="text", text=USER_PROMPT.format(text=source_text))]

        try:
            response = await self.client.prompt(scratch_id, system, parts, model=model)
        except Exception as e:
            if not is_model_not_found_error(e):
                raise
            logger.debug("Model %s unavailable, retrying with server default model", model)
            response = await self.client.prompt(scratch_id, system, parts)

        if response is None:
            logger.debug("Prompt response had no data")
            return None

        text_part = next((p for p in response if p.type == "text"), None)
        if text_part is None or text_part.text is None:
            logger.debug("Prompt response had no text part")
            return None

        return truncate_title(text_part.text, self.config.title_max_length)
