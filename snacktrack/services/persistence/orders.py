"""Order persistence service."""
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, desc

from snacktrack.db.models import Order


class OrderNotFoundError(LookupError):
    """No order with the given id."""

    def __init__(self, order_id: int):
        self.order_id = order_id
        super().__init__(f"Order with ID {order_id} not found")


class OrderPersistenceService:
    """Service for persisting order data."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create_order(
        self,
        customer_id: Optional[str],
        items: List[Dict[str, Any]],
        total_price: Decimal,
        order_type: str = "delivery",
        customer_name: Optional[str] = None,
        customer_phone: Optional[str] = None,
        delivery_address: Optional[str] = None,
        special_instructions: Optional[str] = None,
        requested_time: Optional[str] = None,
        payment_method: Optional[str] = None,
        discount_code: Optional[str] = None,
        raw_text: Optional[str] = None,
    ) -> Order:
        """Create a new order with status 'new'."""
        order = Order(
            customer_id=customer_id,
            customer_name=customer_name,
            customer_phone=customer_phone,
            status="new",
            order_type=order_type,
            total_price=total_price,
            items=items,
            delivery_address=delivery_address,
            special_instructions=special_instructions,
            requested_time=requested_time,
            payment_method=payment_method,
            discount_code=discount_code,
            raw_text=raw_text,
        )
        self.db.add(order)
        await self.db.commit()
        await self.db.refresh(order)
        return order

    async def get_orders(
        self,
        status: Optional[str] = None,
        customer_id: Optional[str] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        limit: int = 100,
    ) -> List[Order]:
        """Get orders matching the filters, newest first."""
        query = select(Order)
        if status:
            query = query.where(Order.status == status)
        if customer_id:
            query = query.where(Order.customer_id == customer_id)
        if start:
            query = query.where(Order.created_at >= start)
        if end:
            query = query.where(Order.created_at <= end)

        result = await self.db.execute(
            query.order_by(desc(Order.created_at), desc(Order.id)).limit(limit)
        )
        return list(result.scalars().all())

    async def get_order_by_id(self, order_id: int) -> Order:
        """
        Get order by ID.

        Raises:
            OrderNotFoundError: no such order
        """
        result = await self.db.execute(select(Order).where(Order.id == order_id))
        order = result.scalar_one_or_none()
        if order is None:
            raise OrderNotFoundError(order_id)
        return order

    async def update_order_status(self, order: Order) -> Order:
        """
        Save a status change already applied to the order.

        The row's version is checked on write, so if another transition was
        saved since this order was read, SQLAlchemy raises StaleDataError.
        """
        await self.db.commit()
        await self.db.refresh(order)
        return order
