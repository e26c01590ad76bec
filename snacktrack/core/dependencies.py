"""FastAPI dependencies."""
from functools import lru_cache
from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from snacktrack.core.config import settings
from snacktrack.db.database import get_db
from snacktrack.services.menu.repository import MenuRepository
from snacktrack.services.menu.in_memory_menu import InMemoryMenuProvider
from snacktrack.services.messaging.base import Notifier
from snacktrack.services.messaging.messenger import MessengerClient
from snacktrack.services.ordering.vocabulary import DEFAULT_VOCABULARY, Vocabulary
from snacktrack.services.ordering.workflow import OrderWorkflow


@lru_cache
def get_menu_repository() -> MenuRepository:
    """Get menu repository instance."""
    return MenuRepository(provider=InMemoryMenuProvider(menu_file=settings.menu_file))


@lru_cache
def get_vocabulary() -> Vocabulary:
    """Get the parser vocabulary, from VOCABULARY_FILE when configured."""
    if settings.vocabulary_file:
        return Vocabulary.from_yaml(settings.vocabulary_file)
    return DEFAULT_VOCABULARY


def get_notifier() -> Notifier:
    """Get the customer notifier."""
    return MessengerClient()


def get_order_workflow(
    db: AsyncSession = Depends(get_db),
    menu_repository: MenuRepository = Depends(get_menu_repository),
    notifier: Notifier = Depends(get_notifier),
    vocabulary: Vocabulary = Depends(get_vocabulary),
) -> OrderWorkflow:
    """Get order workflow bound to the request's database session."""
    return OrderWorkflow(db, menu_repository, notifier, vocabulary)
