"""Database models."""
from datetime import datetime
from sqlalchemy import Column, Integer, String, DateTime, Text, JSON, Numeric
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class Order(Base):
    """Order model."""

    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, index=True)
    customer_id = Column(String, index=True, nullable=True)  # Messenger PSID for chat orders
    customer_name = Column(String, nullable=True)
    customer_phone = Column(String, nullable=True)
    status = Column(String, default="new", nullable=False)  # new, accepted, finished, completed, voided
    order_type = Column(String, default="delivery", nullable=False)  # delivery, pickup
    total_price = Column(Numeric(10, 2), default=0, nullable=False)
    items = Column(JSON, nullable=False, default=list)  # [{id, name, price, quantity}]
    delivery_address = Column(Text, nullable=True)
    special_instructions = Column(Text, nullable=True)
    requested_time = Column(String, nullable=True)
    payment_method = Column(String, nullable=True)
    discount_code = Column(String, nullable=True)
    raw_text = Column(Text, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)
    # Concurrent status changes on the same row: the stale one fails to commit
    version = Column(Integer, nullable=False)

    __mapper_args__ = {"version_id_col": version}
