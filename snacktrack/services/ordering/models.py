"""Order models."""
from decimal import Decimal
from enum import Enum
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field

from snacktrack.services.menu.base import MenuItem

PARSE_FAILURE_MESSAGE = "Sorry, we could not understand this order"


class OrderType(str, Enum):
    """How the customer receives the order."""

    PICKUP = "pickup"
    DELIVERY = "delivery"


class PaymentMethod(str, Enum):
    """Payment methods a customer can name in a chat message."""

    CASH = "cash"
    CARD = "card"
    GCASH = "gcash"
    PAYMAYA = "paymaya"


class OrderLine(BaseModel):
    """One recognised menu item and how many of it."""

    model_config = ConfigDict(frozen=True)

    menu_item: MenuItem
    quantity: int = Field(default=1, ge=1)

    @property
    def line_total(self) -> Decimal:
        return self.menu_item.price * self.quantity


class ParsedOrder(BaseModel):
    """Structured result of parsing one chat message."""

    model_config = ConfigDict(frozen=True)

    items: List[OrderLine] = []
    customer_name: Optional[str] = None
    customer_phone: Optional[str] = None
    delivery_address: Optional[str] = None
    order_type: OrderType = OrderType.DELIVERY
    special_instructions: Optional[str] = None
    requested_time: Optional[str] = None
    payment_method: Optional[PaymentMethod] = None
    discount_code: Optional[str] = None
    original_text: str = ""
    errors: List[str] = []
    degraded: bool = False

    @property
    def is_valid(self) -> bool:
        """True when the order is complete enough to submit."""
        return not self.errors

    @property
    def total_price(self) -> Decimal:
        return sum((line.line_total for line in self.items), Decimal("0"))

    @classmethod
    def degraded_result(cls, text: str, reason: str = PARSE_FAILURE_MESSAGE) -> "ParsedOrder":
        """Minimal well-formed result used when parsing failed internally."""
        return cls(original_text=text or "", errors=[reason], degraded=True)
