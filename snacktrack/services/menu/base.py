"""Menu provider interface."""
from abc import ABC, abstractmethod
from decimal import Decimal
from typing import FrozenSet, List, Optional
from pydantic import BaseModel, ConfigDict


class MenuItem(BaseModel):
    """Menu item as supplied by the catalog. Read-only for its consumers."""

    model_config = ConfigDict(frozen=True)

    id: int
    name: str
    localized_name: Optional[str] = None
    description: Optional[str] = None
    price: Decimal
    category: Optional[str] = None
    aliases: FrozenSet[str] = frozenset()
    available: bool = True

    def display_name(self, language: str = "en") -> str:
        """Name to show in the given language."""
        if language != "en" and self.localized_name:
            return self.localized_name
        return self.name


class Menu(BaseModel):
    """Menu model."""

    items: List[MenuItem]
    categories: List[str] = []


def _match_rank(item: MenuItem, phrase: str) -> Optional[int]:
    """
    Rank how well an item matches a lowercase phrase.

    0 = exact name/localized name, 1 = name/localized name prefix,
    2 = alias match or name substring, None = no match.
    """
    names = [item.name.lower()]
    if item.localized_name:
        names.append(item.localized_name.lower())
    aliases = [alias.lower() for alias in item.aliases]

    if phrase in names:
        return 0
    if any(name.startswith(phrase) for name in names):
        return 1
    if any(phrase in candidate for candidate in names + aliases):
        return 2
    return None


def rank_menu_items(
    items: List[MenuItem], phrase: str, language: str = "en"
) -> List[MenuItem]:
    """
    Return the available items matching a phrase, best match first.

    Args:
        items: Items to search
        phrase: Free-text phrase, compared case-insensitively
        language: Display language used to break ties

    Returns:
        Matching items ordered by rank, then display name
    """
    phrase = phrase.strip().lower()
    if not phrase:
        return []

    ranked = []
    for item in items:
        if not item.available:
            continue
        rank = _match_rank(item, phrase)
        if rank is not None:
            ranked.append((rank, item.display_name(language).lower(), item))

    ranked.sort(key=lambda entry: (entry[0], entry[1]))
    return [item for _, _, item in ranked]


class MenuProvider(ABC):
    """Abstract base class for menu providers."""

    @abstractmethod
    async def get_menu(self) -> Menu:
        """Get the full menu."""
        pass

    @abstractmethod
    async def find_by_name(self, phrase: str, language: str = "en") -> List[MenuItem]:
        """Find ranked candidate items for a free-text phrase."""
        pass

    @abstractmethod
    async def get_item_by_id(self, item_id: int) -> Optional[MenuItem]:
        """Get a menu item by id."""
        pass
