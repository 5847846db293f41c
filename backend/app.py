import logging
import os
from pathlib import Path

from dotenv import load_dotenv
from fastapi import FastAPI

from backend.routes import router
from vanguard.storage import Storage

load_dotenv(Path(__file__).parent.parent / ".env")

DEFAULT_DATA_DIR = Path(__file__).parent.parent / "data"

logger = logging.getLogger(__name__)


def create_app(data_dir: Path | None = None) -> FastAPI:
    resolved = data_dir or Path(os.getenv("DATA_DIR", str(DEFAULT_DATA_DIR)))

    app = FastAPI(title="Vanguard PbP")
    app.state.storage = Storage(resolved)
    app.include_router(router, prefix="/api")
    logger.info("storage at %s", resolved)
    return app
