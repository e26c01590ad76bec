"""Order creation and status management flow."""
import logging
from typing import Optional, Tuple
from sqlalchemy.ext.asyncio import AsyncSession

from snacktrack.db.models import Order
from snacktrack.services.menu.repository import MenuRepository
from snacktrack.services.messaging.base import Notifier
from snacktrack.services.messaging.webhook import IncomingMessage
from snacktrack.services.ordering.messages import (
    build_clarification,
    build_confirmation,
    build_status_update,
)
from snacktrack.services.ordering.models import ParsedOrder
from snacktrack.services.ordering.parser import OrderTextParser
from snacktrack.services.ordering.status import OrderStatus, OrderStatusMachine
from snacktrack.services.ordering.vocabulary import DEFAULT_VOCABULARY, Vocabulary
from snacktrack.services.persistence.orders import OrderPersistenceService

logger = logging.getLogger(__name__)

# Messages answered with the menu instead of being parsed as orders
MENU_REQUESTS = frozenset({"menu", "hi", "hello", "help", "start", "get_started"})


class OrderWorkflow:
    """Creates orders from chat messages and moves them through their statuses."""

    def __init__(
        self,
        db: AsyncSession,
        menu_repository: MenuRepository,
        notifier: Notifier,
        vocabulary: Vocabulary = DEFAULT_VOCABULARY,
    ):
        self.menu_repository = menu_repository
        self.notifier = notifier
        self.parser = OrderTextParser(menu_repository, vocabulary)
        self.status_machine = OrderStatusMachine()
        self.order_persistence = OrderPersistenceService(db)

    async def _notify(self, recipient_id: Optional[str], text: str) -> bool:
        """Send a message; failures are logged and reported as False."""
        if not recipient_id:
            return False
        try:
            await self.notifier.send_text(recipient_id, text)
            return True
        except Exception as e:
            logger.warning(
                f"[ORDER WORKFLOW] Failed to notify {recipient_id} - "
                f"Error: {type(e).__name__}: {str(e)}"
            )
            return False

    async def create_order_from_text(
        self, text: str, customer_id: Optional[str] = None
    ) -> Tuple[Optional[Order], ParsedOrder]:
        """
        Parse a message and store it as a new order.

        Returns:
            Tuple of (created order or None when no item was recognised, parse result)
        """
        parsed = await self.parser.parse_order_text(text)
        if not parsed.items:
            logger.info(
                f"[ORDER WORKFLOW] No items recognised, order not created - "
                f"customer: {customer_id}, errors: {parsed.errors}"
            )
            return None, parsed

        order = await self.order_persistence.create_order(
            customer_id=customer_id,
            items=[
                {
                    "id": line.menu_item.id,
                    "name": line.menu_item.name,
                    "price": float(line.menu_item.price),
                    "quantity": line.quantity,
                }
                for line in parsed.items
            ],
            total_price=parsed.total_price,
            order_type=parsed.order_type.value,
            customer_name=parsed.customer_name,
            customer_phone=parsed.customer_phone,
            delivery_address=parsed.delivery_address,
            special_instructions=parsed.special_instructions,
            requested_time=parsed.requested_time,
            payment_method=parsed.payment_method.value if parsed.payment_method else None,
            discount_code=parsed.discount_code,
            raw_text=text,
        )
        logger.info(
            f"[ORDER WORKFLOW] Created order #{order.id} - customer: {customer_id}, "
            f"items: {len(parsed.items)}, total: {order.total_price}"
        )
        return order, parsed

    async def handle_message(self, message: IncomingMessage) -> Optional[Order]:
        """
        Answer one incoming chat message.

        Menu requests get the menu, orders get a confirmation, and messages
        without any recognisable item get the errors and the menu.
        """
        content = message.content.strip()
        if content.lower() in MENU_REQUESTS:
            await self._notify(message.sender_id, await self.menu_repository.get_menu_text())
            return None

        order, parsed = await self.create_order_from_text(content, customer_id=message.sender_id)
        if order is None:
            menu_text = await self.menu_repository.get_menu_text()
            await self._notify(message.sender_id, build_clarification(parsed, menu_text))
            return None

        await self._notify(message.sender_id, build_confirmation(order, parsed))
        return order

    async def update_status(self, order_id: int, status: str) -> Order:
        """
        Move an order to a new status and tell the customer.

        Raises:
            OrderNotFoundError: no such order
            InvalidStatusError / InvalidTransitionError: change not allowed
        """
        order = await self.order_persistence.get_order_by_id(order_id)
        previous = order.status
        self.status_machine.transition(order, status)
        order = await self.order_persistence.update_order_status(order)
        logger.info(f"[ORDER WORKFLOW] Order #{order.id} status: {previous} -> {order.status}")

        # The status change stands even if the customer can't be reached
        text = build_status_update(order)
        if text:
            await self._notify(order.customer_id, text)
        return order

    def next_status(self, order: Order) -> Optional[OrderStatus]:
        return self.status_machine.next_status(order.status)
