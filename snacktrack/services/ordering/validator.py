"""Order validation service."""
import re
from typing import List, Optional

from snacktrack.services.ordering.models import OrderLine, OrderType
from snacktrack.services.ordering.vocabulary import DEFAULT_VOCABULARY, Vocabulary

ZERO_QUANTITY_RE = re.compile(r"\b0\s+\w+\b")
PHONE_RE = re.compile(r"^\+?\d{7,15}$")
_WORD_RE = re.compile(r"[^\W_]+")

ZERO_QUANTITY_MESSAGE = "contains items with zero quantity"
NO_ITEMS_MESSAGE = "No menu items found in order"
MISSING_ADDRESS_MESSAGE = "Delivery address is missing"


def is_plausible_phone(phone: Optional[str]) -> bool:
    """Digits with an optional leading '+', 7 to 15 digits long."""
    return bool(phone) and PHONE_RE.match(phone) is not None


class OrderValidator:
    """Produces the human-readable problems of a parsed order."""

    def __init__(self, vocabulary: Vocabulary = DEFAULT_VOCABULARY):
        self.vocabulary = vocabulary

    def unknown_words(self, text: str) -> List[str]:
        """Words longer than three letters that are not filler, first mention order."""
        words = []
        for word in _WORD_RE.findall(text.lower()):
            if len(word) > 3 and word not in self.vocabulary.filter_words and word not in words:
                words.append(word)
        return words

    def validate(
        self,
        original_text: str,
        items: List[OrderLine],
        order_type: OrderType,
        delivery_address: Optional[str],
        customer_phone: Optional[str],
        raw_phone: Optional[str] = None,
    ) -> List[str]:
        """
        Validate a parsed order.

        Args:
            original_text: The message as received
            items: Recognised order lines
            order_type: Pickup or delivery
            delivery_address: Extracted address, if any
            customer_phone: Sanitized phone as extracted, None if not given
            raw_phone: Phone as the customer wrote it, used in the message

        Returns:
            List of error messages, empty when the order can be submitted
        """
        errors = []

        if ZERO_QUANTITY_RE.search(original_text):
            errors.append(ZERO_QUANTITY_MESSAGE)

        if not items:
            unknown = self.unknown_words(original_text)
            if unknown:
                errors.append(f"Unknown menu items: {', '.join(unknown)}")
            else:
                errors.append(NO_ITEMS_MESSAGE)

        if order_type == OrderType.DELIVERY and not delivery_address:
            errors.append(MISSING_ADDRESS_MESSAGE)

        if customer_phone is not None and not is_plausible_phone(customer_phone):
            errors.append(f"Invalid phone number: {raw_phone or customer_phone}")

        return errors
