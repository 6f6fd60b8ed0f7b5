import logging
import sys

from config import configure_logging, get_settings
from form_service import prepare_store
from stores import build_store

logger = logging.getLogger(__name__)


def init_store() -> bool:
    settings = get_settings()
    logger.info(f"Initializing {settings.STORAGE_BACKEND} store...")
    store = build_store(settings)
    ok = prepare_store(store, settings.SHEET_TITLE)
    if ok:
        logger.info("Store initialization completed successfully!")
    return ok


if __name__ == "__main__":
    configure_logging()
    sys.exit(0 if init_store() else 1)
