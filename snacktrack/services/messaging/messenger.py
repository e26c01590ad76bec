"""Facebook Messenger Send API client."""
import logging
from typing import Any, Dict, Optional

import httpx

from snacktrack.core.config import settings
from snacktrack.services.messaging.base import Notifier

logger = logging.getLogger(__name__)


class MessengerError(Exception):
    """A message could not be sent through Messenger."""


class MessengerClient(Notifier):
    """Sends messages to customers through the Graph API."""

    def __init__(
        self,
        page_token: Optional[str] = None,
        api_url: Optional[str] = None,
        api_version: Optional[str] = None,
        timeout: float = 10.0,
    ):
        self.page_token = settings.fb_page_token if page_token is None else page_token
        self.api_url = (api_url or settings.fb_graph_api_url).rstrip("/")
        self.api_version = api_version or settings.fb_graph_api_version
        self.timeout = timeout

    @property
    def messages_url(self) -> str:
        return f"{self.api_url}/{self.api_version}/me/messages"

    async def send_message(self, recipient_id: str, message: Dict[str, Any]) -> Dict[str, Any]:
        """
        Send a message payload to a recipient.

        Args:
            recipient_id: Page-scoped id of the customer
            message: Messenger message object

        Returns:
            Graph API response body

        Raises:
            MessengerError: token missing or the API rejected the message
        """
        if not self.page_token:
            raise MessengerError("Missing FB_PAGE_TOKEN setting")

        body = {"recipient": {"id": recipient_id}, "message": message}
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(
                    self.messages_url,
                    json=body,
                    headers={"Authorization": f"Bearer {self.page_token}"},
                )
        except httpx.HTTPError as e:
            raise MessengerError(f"Failed to reach Messenger: {type(e).__name__}: {str(e)}") from e

        if response.status_code != 200:
            raise MessengerError(
                f"Failed to send message. Status: {response.status_code}, "
                f"Response: {response.text}"
            )

        logger.debug(f"[MESSENGER] Message sent to {recipient_id}")
        return response.json()

    async def send_text(self, recipient_id: str, text: str) -> Dict[str, Any]:
        """Send a text message."""
        return await self.send_message(recipient_id, {"text": text})
