"""Menu repository."""
from typing import List, Optional
from snacktrack.core.config import settings
from snacktrack.services.menu.base import Menu, MenuItem, MenuProvider


class MenuRepository:
    """Repository for menu operations."""

    def __init__(self, provider: MenuProvider):
        self.provider = provider

    async def get_menu(self) -> Menu:
        """Get the full menu."""
        return await self.provider.get_menu()

    async def find_by_name(self, phrase: str, language: str = "en") -> List[MenuItem]:
        """Find ranked candidate items for a phrase."""
        return await self.provider.find_by_name(phrase, language=language)

    async def get_item_by_id(self, item_id: int) -> Optional[MenuItem]:
        """Get item by id."""
        return await self.provider.get_item_by_id(item_id)

    async def get_menu_text(self, language: str = "en") -> str:
        """Get menu as a chat message, with ordering instructions."""
        menu = await self.get_menu()
        lines = [f"Welcome to {settings.restaurant_name}! Here's our menu:"]
        for category in menu.categories:
            items = [
                item for item in menu.items
                if item.category == category and item.available
            ]
            if not items:
                continue
            lines.append(f"\n{category}:")
            for item in items:
                lines.append(
                    f"  - {item.display_name(language)} - "
                    f"{settings.currency_symbol}{item.price:.2f}"
                )

        lines.extend([
            "\nTo place an order, send your order like this:",
            "Name: (Your Name)",
            "Phone: (Your Number)",
            "2 burger and 1 fries, deliver to (Your Address)",
            "\nExample:",
            "Name: Juan Dela Cruz",
            "Phone: 09123456789",
            "2 burger at 1 pritong patatas, no onions, deliver to 123 Main St",
        ])
        return "\n".join(lines)
