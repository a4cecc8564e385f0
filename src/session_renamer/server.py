"""FastAPI server receiving the host's chat hook callbacks."""

import logging
import os
from contextlib import asynccontextmanager

from fastapi import Body, FastAPI, HTTPException, status

from .client import OpenCodeClient
from .config import load_config
from .core import MessageEvent
from .renamer import SessionRenamer

logger = logging.getLogger(__name__)

DEFAULT_SERVER_URL = "http://127.0.0.1:4096"

# Renamer cache (built on first request)
_renamer: SessionRenamer | None = None


def _get_renamer() -> SessionRenamer:
    """Lazily build the renamer and its host client from the environment."""
    global _renamer
    if _renamer is None:
        directory = os.environ.get("SESSION_RENAMER_DIRECTORY") or os.getcwd()
        server_url = os.environ.get("SESSION_RENAMER_SERVER_URL") or DEFAULT_SERVER_URL
        config = load_config(directory)
        if config.debug:
            logging.getLogger("session_renamer").setLevel(logging.DEBUG)
        client = OpenCodeClient(server_url, directory=directory)
        _renamer = SessionRenamer(client, config)
        logger.info("Session renamer ready for %s (%s)", server_url, directory)
        logger.debug("Plugin loaded with config: %s", config)
    return _renamer


@asynccontextmanager
async def lifespan(app: FastAPI):
    global _renamer
    yield
    if _renamer is not None:
        await _renamer.wait_idle()
        await _renamer.client.aclose()
        _renamer = None


app = FastAPI(title="session-renamer", version="0.1.0", lifespan=lifespan)


# ── Routes ───────────────────────────────────────────────────────


@app.post("/api/hooks/chat.message", status_code=status.HTTP_202_ACCEPTED)
async def chat_message(payload: dict = Body(...)):
    """Accept a "message completed" event; any rename runs in the background."""
    try:
        event = MessageEvent.from_dict(payload)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))

    await _get_renamer().on_message(event)
    return {"accepted": True}


@app.get("/api/status")
async def get_status():
    """Return tracked session counts and the effective config."""
    renamer = _get_renamer()
    return {
        "sessions": renamer.tracker.snapshot(),
        "config": renamer.config.to_dict(),
    }
