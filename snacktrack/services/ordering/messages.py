"""Customer-facing chat messages built from orders."""
from decimal import Decimal
from typing import Optional, Union

from snacktrack.core.config import settings
from snacktrack.db.models import Order
from snacktrack.services.ordering.models import OrderType, ParsedOrder
from snacktrack.services.ordering.status import OrderStatus

STATUS_MESSAGES = {
    OrderStatus.ACCEPTED: "Your order has been accepted and is being prepared!",
    OrderStatus.FINISHED: "Your order is made and will be delivered shortly.",
    OrderStatus.COMPLETED: "Your order has been completed. Thank you for ordering with us!",
    OrderStatus.VOIDED: "Your order has been voided. Please contact us if you have any questions.",
}

PICKUP_READY_MESSAGE = "Your order is ready for pickup."

APOLOGY_MESSAGE = "Sorry, we couldn't process your order at this time. Please try again later."


def format_price(amount: Union[Decimal, float, int, None]) -> str:
    return f"{settings.currency_symbol}{Decimal(str(amount or 0)):.2f}"


def build_status_update(order: Order) -> Optional[str]:
    """Notification for the order's current status, None if there is nothing to say."""
    try:
        status = OrderStatus(order.status)
    except ValueError:
        return None

    message = STATUS_MESSAGES.get(status)
    if status == OrderStatus.FINISHED and order.order_type == OrderType.PICKUP.value:
        message = PICKUP_READY_MESSAGE
    if message is None:
        return None
    return f"Order #{order.id} Update: {message}"


def build_confirmation(order: Order, parsed: ParsedOrder) -> str:
    """Itemized confirmation sent after an order is created."""
    greeting = f"Thank you, {parsed.customer_name}!" if parsed.customer_name else "Thank you!"
    lines = [f"{greeting} Your order #{order.id} has been received and is being processed.", ""]

    for line in parsed.items:
        lines.append(
            f"- {line.quantity} x {line.menu_item.name} - {format_price(line.line_total)}"
        )
    lines.append(f"Total: {format_price(order.total_price)}")

    if parsed.order_type == OrderType.PICKUP:
        lines.append("For pickup")
    elif parsed.delivery_address:
        lines.append(f"Deliver to: {parsed.delivery_address}")
    if parsed.requested_time:
        lines.append(f"Requested time: {parsed.requested_time}")
    if parsed.payment_method:
        lines.append(f"Payment: {parsed.payment_method.value}")
    if parsed.discount_code:
        lines.append(f"Discount code: {parsed.discount_code}")
    if parsed.special_instructions:
        lines.append(f"Notes: {parsed.special_instructions}")

    if parsed.errors:
        lines.append("")
        lines.append("Please note:")
        lines.extend(f"- {error}" for error in parsed.errors)

    return "\n".join(lines)


def build_clarification(parsed: ParsedOrder, menu_text: str) -> str:
    """Reply for a message in which no menu item was recognised."""
    lines = ["Sorry, we couldn't find any menu items in your message."]
    lines.extend(f"- {error}" for error in parsed.errors)
    lines.append("")
    lines.append(menu_text)
    return "\n".join(lines)
