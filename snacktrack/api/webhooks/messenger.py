"""Facebook Messenger webhook endpoints."""
import logging
from typing import List, Optional
from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Query, Request
from fastapi.responses import PlainTextResponse
from sqlalchemy.ext.asyncio import async_sessionmaker

from snacktrack.core.config import settings
from snacktrack.core.dependencies import get_menu_repository, get_notifier, get_vocabulary
from snacktrack.db.database import get_session_factory
from snacktrack.services.menu.repository import MenuRepository
from snacktrack.services.messaging.base import Notifier
from snacktrack.services.messaging.webhook import IncomingMessage, process_webhook
from snacktrack.services.ordering.messages import APOLOGY_MESSAGE
from snacktrack.services.ordering.vocabulary import Vocabulary
from snacktrack.services.ordering.workflow import OrderWorkflow

router = APIRouter()
logger = logging.getLogger(__name__)


async def handle_messages(
    messages: List[IncomingMessage],
    session_factory: async_sessionmaker,
    menu_repository: MenuRepository,
    notifier: Notifier,
    vocabulary: Vocabulary,
) -> None:
    """
    Answer webhook messages after the response has been sent.

    Runs with its own database session since the request's session is
    closed by then. A failing message gets an apology and does not stop
    the rest of the batch.
    """
    async with session_factory() as db:
        workflow = OrderWorkflow(db, menu_repository, notifier, vocabulary)
        for message in messages:
            try:
                await workflow.handle_message(message)
            except Exception as e:
                logger.error(
                    f"[MESSENGER] Error handling message from {message.sender_id} - "
                    f"Error: {type(e).__name__}: {str(e)}",
                    exc_info=True
                )
                await db.rollback()
                try:
                    await notifier.send_text(message.sender_id, APOLOGY_MESSAGE)
                except Exception as send_error:
                    logger.warning(
                        f"[MESSENGER] Could not send apology to {message.sender_id} - "
                        f"Error: {type(send_error).__name__}: {str(send_error)}"
                    )


@router.get("/webhook")
async def verify_webhook(
    mode: Optional[str] = Query(None, alias="hub.mode"),
    verify_token: Optional[str] = Query(None, alias="hub.verify_token"),
    challenge: Optional[str] = Query(None, alias="hub.challenge"),
):
    """
    Webhook verification handshake.

    Facebook calls this once when the webhook is registered and expects the
    challenge echoed back when the token matches.
    """
    if not mode or not verify_token:
        raise HTTPException(status_code=404, detail="Not found")

    if mode == "subscribe" and verify_token == settings.fb_verify_token:
        logger.info("[MESSENGER] Webhook verified")
        return PlainTextResponse(challenge or "")

    logger.warning(f"[MESSENGER] Webhook verification failed - mode: {mode}")
    raise HTTPException(status_code=403, detail="Verification failed")


@router.post("/webhook")
async def receive_webhook(
    request: Request,
    background_tasks: BackgroundTasks,
    session_factory: async_sessionmaker = Depends(get_session_factory),
    menu_repository: MenuRepository = Depends(get_menu_repository),
    notifier: Notifier = Depends(get_notifier),
    vocabulary: Vocabulary = Depends(get_vocabulary),
):
    """
    Receive Messenger events.

    Acknowledges right away; messages are answered in the background.
    """
    body = await request.json()
    messages = process_webhook(body)
    logger.info(
        f"[MESSENGER] Webhook received - object: {body.get('object')}, messages: {len(messages)}"
    )

    if messages:
        background_tasks.add_task(
            handle_messages, messages, session_factory, menu_repository, notifier, vocabulary
        )
    return PlainTextResponse("EVENT_RECEIVED")
