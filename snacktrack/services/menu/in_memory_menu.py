"""In-memory menu provider."""
import logging
import yaml
from pathlib import Path
from typing import List, Optional
from snacktrack.services.menu.base import Menu, MenuItem, MenuProvider, rank_menu_items

logger = logging.getLogger(__name__)


class InMemoryMenuProvider(MenuProvider):
    """In-memory menu provider using YAML configuration."""

    def __init__(self, menu_file: Optional[str] = None):
        """Initialize with optional menu file path."""
        if menu_file is None:
            menu_file = Path(__file__).parent / "data" / "menu.yaml"
        self.menu_file = Path(menu_file)
        self._menu: Optional[Menu] = None

    async def _load_menu(self) -> Menu:
        """Load menu from YAML file."""
        if self._menu is None:
            if not self.menu_file.exists():
                logger.warning(f"[MENU] Menu file not found: {self.menu_file}, using an empty menu")
                self._menu = Menu(items=[], categories=[])
            else:
                with open(self.menu_file, "r", encoding="utf-8") as f:
                    data = yaml.safe_load(f) or {}
                # Items without an explicit id are numbered in file order
                items = [
                    MenuItem(**{"id": index, **item})
                    for index, item in enumerate(data.get("items", []), start=1)
                ]
                categories = data.get("categories") or list(
                    dict.fromkeys(item.category for item in items if item.category)
                )
                self._menu = Menu(items=items, categories=categories)
                logger.info(
                    f"[MENU] Loaded {len(items)} items in {len(categories)} categories "
                    f"from {self.menu_file}"
                )
        return self._menu

    async def get_menu(self) -> Menu:
        """Get the full menu."""
        return await self._load_menu()

    async def find_by_name(self, phrase: str, language: str = "en") -> List[MenuItem]:
        """Find ranked candidate items for a free-text phrase."""
        menu = await self._load_menu()
        return rank_menu_items(menu.items, phrase, language=language)

    async def get_item_by_id(self, item_id: int) -> Optional[MenuItem]:
        """Get a menu item by id."""
        menu = await self._load_menu()
        for item in menu.items:
            if item.id == item_id:
                return item
        return None
