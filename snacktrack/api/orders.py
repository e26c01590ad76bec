"""Order API endpoints."""
import logging
from datetime import datetime
from typing import List, Optional
from fastapi import APIRouter, Depends, Request, HTTPException
from pydantic import BaseModel, ConfigDict

from snacktrack.core.dependencies import get_menu_repository, get_order_workflow, get_vocabulary
from snacktrack.db.models import Order
from snacktrack.services.menu.repository import MenuRepository
from snacktrack.services.ordering.models import ParsedOrder
from snacktrack.services.ordering.parser import OrderTextParser
from snacktrack.services.ordering.status import InvalidStatusError, InvalidTransitionError
from snacktrack.services.ordering.vocabulary import Vocabulary
from snacktrack.services.ordering.workflow import OrderWorkflow
from snacktrack.services.persistence.orders import OrderNotFoundError


router = APIRouter()
logger = logging.getLogger(__name__)


class OrderItemResponse(BaseModel):
    """Order item response model."""
    id: Optional[int] = None
    name: str
    price: float
    quantity: int


class OrderResponse(BaseModel):
    """Order response model."""
    id: int
    customer_id: str | None = None
    customer_name: str | None = None
    customer_phone: str | None = None
    status: str
    order_type: str
    total_price: float
    items: List[OrderItemResponse] = []
    delivery_address: str | None = None
    special_instructions: str | None = None
    requested_time: str | None = None
    payment_method: str | None = None
    discount_code: str | None = None
    created_at: str
    updated_at: str | None = None
    next_status: str | None = None

    model_config = ConfigDict(from_attributes=True)


class ParseRequest(BaseModel):
    """Text to parse."""
    text: str


class CreateOrderRequest(BaseModel):
    """Manual order entry from the dashboard."""
    text: str
    customer_id: Optional[str] = None


class StatusUpdateRequest(BaseModel):
    """Status change request."""
    status: str


def to_order_response(order: Order, workflow: OrderWorkflow) -> OrderResponse:
    """Convert an order row to its response model."""
    next_status = workflow.next_status(order)
    return OrderResponse(
        id=order.id,
        customer_id=order.customer_id,
        customer_name=order.customer_name,
        customer_phone=order.customer_phone,
        status=order.status,
        order_type=order.order_type,
        total_price=float(order.total_price or 0),
        items=[OrderItemResponse(**item) for item in (order.items or [])],
        delivery_address=order.delivery_address,
        special_instructions=order.special_instructions,
        requested_time=order.requested_time,
        payment_method=order.payment_method,
        discount_code=order.discount_code,
        created_at=order.created_at.isoformat() if order.created_at else "",
        updated_at=order.updated_at.isoformat() if order.updated_at else None,
        next_status=next_status.value if next_status else None,
    )


@router.post("/api/orders/parse", response_model=ParsedOrder)
async def parse_order(
    body: ParseRequest,
    menu_repository: MenuRepository = Depends(get_menu_repository),
    vocabulary: Vocabulary = Depends(get_vocabulary),
):
    """Parse order text without creating an order."""
    logger.info(f"[ORDERS PARSE] Request received - text length: {len(body.text)}")
    parser = OrderTextParser(menu_repository, vocabulary)
    return await parser.parse_order_text(body.text)


@router.post("/api/orders", response_model=OrderResponse, status_code=201)
async def create_order(
    body: CreateOrderRequest,
    workflow: OrderWorkflow = Depends(get_order_workflow),
):
    """Create an order from free text (manual order entry)."""
    logger.info(f"[ORDERS CREATE] Request received - customer: {body.customer_id}")

    try:
        order, parsed = await workflow.create_order_from_text(body.text, customer_id=body.customer_id)
    except Exception as e:
        logger.error(
            f"[ORDERS CREATE] Error creating order - Error: {type(e).__name__}: {str(e)}",
            exc_info=True
        )
        raise HTTPException(status_code=500, detail=f"Error creating order: {str(e)}")

    if order is None:
        raise HTTPException(
            status_code=422,
            detail={"message": "No menu items found in order", "errors": parsed.errors},
        )
    return to_order_response(order, workflow)


@router.get("/api/orders", response_model=List[OrderResponse])
async def get_orders(
    request: Request,
    status: Optional[str] = None,
    customer_id: Optional[str] = None,
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
    limit: int = 100,
    workflow: OrderWorkflow = Depends(get_order_workflow),
):
    """Get orders, newest first, with optional filters."""
    logger.info(
        f"[ORDERS] Request received - status: {status}, customer: {customer_id}, "
        f"limit: {limit}, Client: {request.client.host if request.client else 'unknown'}"
    )

    try:
        orders = await workflow.order_persistence.get_orders(
            status=status, customer_id=customer_id, start=start, end=end, limit=limit
        )
        logger.info(f"[ORDERS] Found {len(orders)} orders")
        return [to_order_response(order, workflow) for order in orders]

    except Exception as e:
        logger.error(
            f"[ORDERS] Error fetching orders - Error: {type(e).__name__}: {str(e)}",
            exc_info=True
        )
        raise HTTPException(status_code=500, detail=f"Error fetching orders: {str(e)}")


@router.get("/api/orders/{order_id}", response_model=OrderResponse)
async def get_order(
    order_id: int,
    workflow: OrderWorkflow = Depends(get_order_workflow),
):
    """Get a single order."""
    try:
        order = await workflow.order_persistence.get_order_by_id(order_id)
    except OrderNotFoundError:
        raise HTTPException(status_code=404, detail="Order not found")
    return to_order_response(order, workflow)


@router.patch("/api/orders/{order_id}/status", response_model=OrderResponse)
async def update_order_status(
    order_id: int,
    body: StatusUpdateRequest,
    workflow: OrderWorkflow = Depends(get_order_workflow),
):
    """Change an order's status and notify the customer."""
    logger.info(f"[ORDER STATUS] Request received - order: {order_id}, status: {body.status}")

    try:
        order = await workflow.update_status(order_id, body.status)
    except OrderNotFoundError:
        raise HTTPException(status_code=404, detail="Order not found")
    except InvalidStatusError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except InvalidTransitionError as e:
        raise HTTPException(
            status_code=409,
            detail={"message": str(e), "allowed": e.allowed},
        )
    except Exception as e:
        logger.error(
            f"[ORDER STATUS] Error updating order {order_id} - "
            f"Error: {type(e).__name__}: {str(e)}",
            exc_info=True
        )
        raise HTTPException(status_code=500, detail=f"Error updating order status: {str(e)}")

    return to_order_response(order, workflow)
