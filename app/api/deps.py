"""
Shared FastAPI dependencies
"""
import logging
from functools import lru_cache

from ..core.clock import Clock
from ..core.config import settings
from ..core.firebase_config import initialize_firebase
from ..services.stores.base import ReadingStore

logger = logging.getLogger(__name__)


@lru_cache()
def get_reading_store() -> ReadingStore:
    """Process-wide store selected by READING_STORE"""
    if settings.uses_firestore:
        from ..services.stores.firestore_store import FirestoreReadingStore

        initialize_firebase()
        logger.info("Using Firestore reading store")
        return FirestoreReadingStore()

    from ..services.stores.memory_store import InMemoryReadingStore

    logger.warning("⚠️  Using in-memory reading store; data is lost on restart")
    return InMemoryReadingStore()


def get_clock() -> Clock:
    return Clock()
