"""Quantity resolution and menu item matching over a token stream."""
import logging
from typing import Dict, List, NamedTuple, Optional, Sequence, Tuple

from snacktrack.services.menu.base import MenuItem
from snacktrack.services.menu.repository import MenuRepository
from snacktrack.services.ordering.models import OrderLine
from snacktrack.services.ordering.vocabulary import DEFAULT_VOCABULARY, Vocabulary

logger = logging.getLogger(__name__)

MAX_WINDOW = 4

# Shorter phrases would match almost any item by substring
MIN_PHRASE_LENGTH = 3


class QuantityResolver:
    """Recognises English and Tagalog quantity words and digits."""

    def __init__(self, vocabulary: Vocabulary = DEFAULT_VOCABULARY):
        self.vocabulary = vocabulary

    def resolve(self, token: str) -> Optional[int]:
        return self.vocabulary.quantity(token)


class TokenCursor:
    """Forward-only cursor over an immutable token sequence."""

    def __init__(self, tokens: Sequence[str]):
        self.tokens: Tuple[str, ...] = tuple(tokens)
        self.position = 0

    @property
    def done(self) -> bool:
        return self.position >= len(self.tokens)

    def peek(self) -> str:
        return self.tokens[self.position]

    def window(self, size: int) -> Tuple[str, ...]:
        return self.tokens[self.position:self.position + size]

    def advance(self, count: int = 1) -> None:
        self.position = min(self.position + count, len(self.tokens))


class MatchResult(NamedTuple):
    lines: List[OrderLine]
    unmatched: List[str]


def singular_forms(token: str) -> List[str]:
    """Candidate singular spellings of a plural-looking token."""
    forms = []
    if len(token) > 3 and token.endswith("s"):
        forms.append(token[:-1])
        if token.endswith("es"):
            forms.append(token[:-2])
    return forms


class ItemMatcher:
    """
    Walks tokens left to right and resolves menu items with quantities.

    Catalog lookups are awaited one at a time: each match moves the cursor
    and fills the phrase cache, so the order of lookups is the text order.
    """

    def __init__(
        self,
        catalog: MenuRepository,
        vocabulary: Vocabulary = DEFAULT_VOCABULARY,
        max_window: int = MAX_WINDOW,
    ):
        self.catalog = catalog
        self.quantity_resolver = QuantityResolver(vocabulary)
        self.max_window = max_window

    async def _lookup(
        self, phrase: str, cache: Dict[str, Optional[MenuItem]]
    ) -> Optional[MenuItem]:
        if len(phrase) < MIN_PHRASE_LENGTH:
            return None
        if phrase not in cache:
            candidates = await self.catalog.find_by_name(phrase)
            cache[phrase] = candidates[0] if candidates else None
        return cache[phrase]

    async def _match_at(
        self, cursor: TokenCursor, cache: Dict[str, Optional[MenuItem]]
    ) -> Tuple[Optional[MenuItem], int]:
        """Longest window starting at the cursor that names a menu item."""
        window = cursor.window(self.max_window)
        for size in range(len(window), 0, -1):
            item = await self._lookup(" ".join(window[:size]), cache)
            if item is not None:
                return item, size

        for form in singular_forms(window[0]):
            item = await self._lookup(form, cache)
            if item is not None:
                return item, 1

        return None, 0

    async def match(self, tokens: Sequence[str]) -> MatchResult:
        """
        Resolve menu items and quantities from a token stream.

        A quantity word applies to the next matched item only. Repeated items
        are merged into their first line with quantities summed.
        """
        cursor = TokenCursor(tokens)
        cache: Dict[str, Optional[MenuItem]] = {}
        items: Dict[int, MenuItem] = {}
        quantities: Dict[int, int] = {}
        unmatched: List[str] = []
        current_quantity = 1

        while not cursor.done:
            token = cursor.peek()

            quantity = self.quantity_resolver.resolve(token)
            if quantity is not None:
                current_quantity = quantity
                cursor.advance()
                continue

            item, consumed = await self._match_at(cursor, cache)
            if item is None:
                unmatched.append(token)
                cursor.advance()
                continue

            logger.debug(
                f"[ITEM MATCHER] Matched '{' '.join(cursor.window(consumed))}' -> "
                f"{item.name} x{current_quantity}"
            )
            if item.id in items:
                quantities[item.id] += current_quantity
            else:
                items[item.id] = item
                quantities[item.id] = current_quantity
            current_quantity = 1
            cursor.advance(consumed)

        lines = [
            OrderLine(menu_item=item, quantity=quantities[item_id])
            for item_id, item in items.items()
        ]
        return MatchResult(lines=lines, unmatched=unmatched)
