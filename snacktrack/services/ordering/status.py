"""Order status lifecycle."""
from datetime import datetime
from enum import Enum
from typing import Any, Dict, FrozenSet, Optional, Union


class OrderStatus(str, Enum):
    """Order statuses. PENDING is the legacy name of NEW."""

    NEW = "new"
    ACCEPTED = "accepted"
    FINISHED = "finished"
    COMPLETED = "completed"
    VOIDED = "voided"
    PENDING = "pending"

    def __str__(self) -> str:
        return self.value


KNOWN_STATUSES: FrozenSet[OrderStatus] = frozenset({
    OrderStatus.NEW,
    OrderStatus.ACCEPTED,
    OrderStatus.FINISHED,
    OrderStatus.COMPLETED,
    OrderStatus.VOIDED,
})

ALLOWED_TRANSITIONS: Dict[OrderStatus, FrozenSet[OrderStatus]] = {
    OrderStatus.NEW: frozenset({OrderStatus.ACCEPTED, OrderStatus.VOIDED}),
    OrderStatus.ACCEPTED: frozenset({OrderStatus.FINISHED, OrderStatus.VOIDED}),
    OrderStatus.FINISHED: frozenset({OrderStatus.COMPLETED, OrderStatus.VOIDED}),
    OrderStatus.COMPLETED: frozenset(),
    OrderStatus.VOIDED: frozenset(),
}

# The forward path staff step through on the dashboard
_FORWARD = {
    OrderStatus.NEW: OrderStatus.ACCEPTED,
    OrderStatus.ACCEPTED: OrderStatus.FINISHED,
    OrderStatus.FINISHED: OrderStatus.COMPLETED,
}


class OrderStatusError(Exception):
    """Base class for rejected status changes."""


class InvalidStatusError(OrderStatusError):
    """The requested status does not exist."""

    def __init__(self, status: Any):
        self.status = status
        valid = ", ".join(sorted(s.value for s in KNOWN_STATUSES))
        super().__init__(f"Invalid status '{status}'. Valid statuses: {valid}")


class InvalidTransitionError(OrderStatusError):
    """The requested status is not reachable from the current one."""

    def __init__(self, current: OrderStatus, target: OrderStatus):
        self.current = current
        self.target = target
        self.allowed = sorted(s.value for s in ALLOWED_TRANSITIONS[current])
        allowed = ", ".join(self.allowed) or "none"
        super().__init__(
            f"Cannot change order status from '{current}' to '{target}'. "
            f"Allowed: {allowed}"
        )


class OrderStatusMachine:
    """Validates and applies order status transitions."""

    @staticmethod
    def normalize(status: Union[str, OrderStatus]) -> OrderStatus:
        """Parse a stored status, mapping the legacy 'pending' onto 'new'."""
        try:
            value = OrderStatus(str(status).strip().lower())
        except ValueError:
            raise InvalidStatusError(status)
        return OrderStatus.NEW if value == OrderStatus.PENDING else value

    def allowed_next(self, status: Union[str, OrderStatus]) -> FrozenSet[OrderStatus]:
        return ALLOWED_TRANSITIONS[self.normalize(status)]

    def next_status(self, status: Union[str, OrderStatus]) -> Optional[OrderStatus]:
        """Next step on the forward path, None for terminal statuses."""
        return _FORWARD.get(self.normalize(status))

    def validate(
        self, current: Union[str, OrderStatus], target: Union[str, OrderStatus]
    ) -> OrderStatus:
        """
        Check a transition without applying it.

        Raises:
            InvalidStatusError: target is not one of the known statuses
            InvalidTransitionError: target is not reachable from current
        """
        try:
            target_status = OrderStatus(str(target).strip().lower())
        except ValueError:
            raise InvalidStatusError(target)
        if target_status not in KNOWN_STATUSES:
            raise InvalidStatusError(target)

        current_status = self.normalize(current)
        if target_status not in ALLOWED_TRANSITIONS[current_status]:
            raise InvalidTransitionError(current_status, target_status)
        return target_status

    def transition(self, order: Any, target: Union[str, OrderStatus]) -> Any:
        """
        Move an order to a new status.

        Only ``status`` and ``updated_at`` are changed on the order, which is
        returned. Saving the change is left to the caller.
        """
        target_status = self.validate(order.status, target)
        order.status = target_status.value
        order.updated_at = datetime.utcnow()
        return order
