"""Messenger webhook event parsing."""
import logging
from typing import Any, Dict, List, Optional
from pydantic import BaseModel

logger = logging.getLogger(__name__)


class IncomingMessage(BaseModel):
    """A customer message received through the webhook."""

    type: str  # text, quick_reply, postback
    sender_id: str
    text: Optional[str] = None
    payload: Optional[str] = None
    timestamp: Optional[int] = None

    @property
    def content(self) -> str:
        return self.text or self.payload or ""


def parse_messaging_event(event: Dict[str, Any]) -> Optional[IncomingMessage]:
    """Parse one messaging event. Returns None for events we do not handle."""
    sender_id = str(event.get("sender", {}).get("id", ""))
    timestamp = event.get("timestamp")
    message = event.get("message") or {}

    if message.get("text"):
        quick_reply = message.get("quick_reply")
        return IncomingMessage(
            type="quick_reply" if quick_reply else "text",
            sender_id=sender_id,
            text=message["text"],
            payload=quick_reply.get("payload") if quick_reply else None,
            timestamp=timestamp,
        )

    if event.get("postback"):
        return IncomingMessage(
            type="postback",
            sender_id=sender_id,
            payload=event["postback"].get("payload"),
            text=event["postback"].get("title"),
            timestamp=timestamp,
        )

    logger.info(f"[WEBHOOK] Ignoring unsupported event from sender {sender_id}")
    return None


def process_webhook(body: Dict[str, Any]) -> List[IncomingMessage]:
    """Extract the customer messages from a webhook body."""
    if body.get("object") != "page":
        return []

    messages = []
    for entry in body.get("entry", []):
        for event in entry.get("messaging", []):
            message = parse_messaging_event(event)
            if message is not None:
                messages.append(message)
    return messages
