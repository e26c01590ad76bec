"""Customer notification interface."""
from abc import ABC, abstractmethod
from typing import Any, Dict


class Notifier(ABC):
    """Sends plain-text messages to customers."""

    @abstractmethod
    async def send_text(self, recipient_id: str, text: str) -> Dict[str, Any]:
        """Send a text message. Raises on delivery failure."""
        pass
