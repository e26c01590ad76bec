"""Menu API endpoints."""
import logging
from decimal import Decimal
from fastapi import APIRouter, Depends, Request, HTTPException, Query
from snacktrack.core.dependencies import get_menu_repository
from snacktrack.services.menu.base import MenuItem
from snacktrack.services.menu.repository import MenuRepository
from pydantic import BaseModel
from typing import List, Optional


router = APIRouter()
logger = logging.getLogger(__name__)


class MenuItemResponse(BaseModel):
    """Menu item response model."""
    id: int
    name: str
    localized_name: Optional[str] = None
    description: Optional[str] = None
    price: float
    category: Optional[str] = None
    aliases: List[str] = []
    available: bool = True

    @classmethod
    def from_item(cls, item: MenuItem) -> "MenuItemResponse":
        return cls(
            id=item.id,
            name=item.name,
            localized_name=item.localized_name,
            description=item.description,
            price=float(item.price or Decimal("0")),
            category=item.category,
            aliases=sorted(item.aliases),
            available=item.available,
        )


class MenuResponse(BaseModel):
    """Menu response model."""
    items: List[MenuItemResponse]
    categories: List[str] = []


@router.get("/api/menu", response_model=MenuResponse)
async def get_menu(
    request: Request,
    menu_repository: MenuRepository = Depends(get_menu_repository),
):
    """Get the full menu."""
    logger.info(
        f"[MENU] Request received - Client: {request.client.host if request.client else 'unknown'}"
    )

    try:
        menu = await menu_repository.get_menu()
        logger.info(f"[MENU] Menu loaded - {len(menu.items)} items, {len(menu.categories)} categories")
        return MenuResponse(
            items=[MenuItemResponse.from_item(item) for item in menu.items],
            categories=menu.categories,
        )

    except Exception as e:
        logger.error(
            f"[MENU] Error fetching menu - Error: {type(e).__name__}: {str(e)}",
            exc_info=True
        )
        raise HTTPException(status_code=500, detail=f"Error fetching menu: {str(e)}")


@router.get("/api/menu/search", response_model=List[MenuItemResponse])
async def search_menu(
    q: str = Query(..., min_length=1),
    language: str = "en",
    menu_repository: MenuRepository = Depends(get_menu_repository),
):
    """Find menu items by name, localized name or alias, best match first."""
    logger.debug(f"[MENU SEARCH] Query: '{q}', language: {language}")
    items = await menu_repository.find_by_name(q, language=language)
    return [MenuItemResponse.from_item(item) for item in items]


@router.get("/api/menu/items/{item_id}", response_model=MenuItemResponse)
async def get_menu_item(
    item_id: int,
    menu_repository: MenuRepository = Depends(get_menu_repository),
):
    """Get a single menu item, e.g. to resolve the ids stored on an order line."""
    item = await menu_repository.get_item_by_id(item_id)
    if item is None:
        raise HTTPException(status_code=404, detail="Menu item not found")
    return MenuItemResponse.from_item(item)
