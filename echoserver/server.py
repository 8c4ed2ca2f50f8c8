from __future__ import annotations

import logging
import os
import sys
import threading
from concurrent.futures import Future
from typing import Optional

import uvicorn
from fastapi import FastAPI

from . import __version__
from .config import ServerConfig, resolve
from .main import create_app

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: Optional[str] = None) -> None:
    level = (level or os.getenv("LOG_LEVEL", "INFO")).upper()
    logging.basicConfig(level=level, format=LOG_FORMAT)


def _listen(app: FastAPI, config: ServerConfig, errs: Future) -> None:
    """Serve until the listener fails, then report why on ``errs``."""
    try:
        host, port = config.bind()
        server = uvicorn.Server(uvicorn.Config(app, host=host, port=port, log_config=None))
        server.run()
        err: BaseException = RuntimeError("listener stopped")
    except SystemExit as exc:
        # uvicorn logs the underlying bind error itself before exiting
        err = RuntimeError(f"listener exited with status {exc.code}")
    except Exception as exc:
        err = exc
    if not errs.done():
        errs.set_result(err)


def serve(app: FastAPI, config: ServerConfig) -> Future:
    """Start the listener in the background and return its fatal-error signal."""
    errs: Future = Future()
    logger.info("Starting HTTP service on %s", config.listen_address)
    threading.Thread(target=_listen, args=(app, config, errs), name="listener", daemon=True).start()
    return errs


def run(config: Optional[ServerConfig] = None, app: Optional[FastAPI] = None) -> int:
    config = config or resolve()
    app = app or create_app(config)

    logger.info("Version %s", __version__)

    errs = serve(app, config)

    # Blocks for the life of the process.
    err = errs.result()
    logger.error("Could not start serving service due to (error: %s)", err)
    return 1


def main() -> None:
    configure_logging()
    sys.exit(run())
