"""
GitHub webhook endpoint.

POST verifies the delivery signature, parses the JSON body and hands it
to the ``EventDispatcher``. GET returns a static capability payload.
"""

import json
import os
from typing import Any, Optional

from fastapi import APIRouter, Depends, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from sqlalchemy.orm import Session

import utils.logging
from app.schemas.activity import Activity
from services.activity_store import ActivityStore
from services.deliveries import DeliveryLedger, dedupe_enabled
from services.dispatcher import DispatchResult, DispatchStatus, EventDispatcher
from services.signature import verify_signature
from utils.database import get_session

logger = utils.logging.get_logger(__name__)

router = APIRouter(prefix="/api/webhooks", tags=["webhooks"])

SIGNATURE_HEADER = "x-hub-signature-256"
EVENT_HEADER = "x-github-event"
DELIVERY_HEADER = "x-github-delivery"


def _error(message: str, status_code: int, **extra: Any) -> JSONResponse:
    return JSONResponse({"error": message, **extra}, status_code=status_code)


def _serialize(result: Any) -> Any:
    if result is None:
        return None
    if isinstance(result, list):
        return [_serialize(item) for item in result]
    return Activity.model_validate(result).model_dump(mode="json", by_alias=True)


def _acknowledge(outcome: DispatchResult) -> dict[str, Any]:
    if outcome.status is DispatchStatus.PING:
        return {"message": "Pong! Webhook configured successfully."}
    if outcome.status is DispatchStatus.UNSUPPORTED:
        return {"message": f"Event {outcome.event} is not handled"}
    return {
        "success": True,
        "event": outcome.event,
        "result": _serialize(outcome.result),
    }


@router.post("/github")
async def receive_github_webhook(
    request: Request, session: Session = Depends(get_session)
):
    """
    Ingest one GitHub webhook delivery.
    :return: 200 acknowledgment, 400 on malformed payloads, 401 on bad
        signatures, 500 when processing fails.
    """
    secret = os.getenv("GITHUB_WEBHOOK_SECRET")
    event: Optional[str] = request.headers.get(EVENT_HEADER)
    delivery_id: Optional[str] = request.headers.get(DELIVERY_HEADER)
    log_extra = {"github_event": event, "delivery_id": delivery_id}

    # Verify against the exact bytes received
    body = await request.body()

    if secret:
        if not verify_signature(body, request.headers.get(SIGNATURE_HEADER), secret):
            logger.warning(
                f"Invalid signature for delivery {delivery_id}", extra=log_extra
            )
            return _error("Invalid signature", 401)
    else:
        logger.warning(
            "GITHUB_WEBHOOK_SECRET is not set; webhook signatures are not verified",
            extra=log_extra,
        )

    try:
        payload = json.loads(body)
    except ValueError:
        return _error("Invalid JSON payload", 400)
    if not isinstance(payload, dict):
        return _error("Invalid JSON payload", 400)

    logger.info(f"Received {event} event (delivery: {delivery_id})", extra=log_extra)

    claimed = False
    try:
        if dedupe_enabled() and delivery_id:
            if not await DeliveryLedger.claim(delivery_id):
                return {"message": f"Delivery {delivery_id} already processed"}
            claimed = True

        dispatcher = EventDispatcher(ActivityStore(session))
        outcome = await run_in_threadpool(dispatcher.dispatch, event, payload)
    except ValidationError as exc:
        if claimed:
            await DeliveryLedger.release(delivery_id)
        logger.warning(f"Payload for {event} failed validation", extra=log_extra)
        return _error(
            "Invalid payload",
            400,
            detail=exc.errors(include_url=False, include_context=False, include_input=False),
        )
    except Exception:  # pylint: disable=broad-exception-caught
        if claimed:
            await DeliveryLedger.release(delivery_id)
        logger.exception(f"Error processing {event}", extra=log_extra)
        return _error("Internal server error", 500)

    if outcome.status is DispatchStatus.PROCESSED:
        logger.info(
            f"Processed {event} event, {len(outcome.activities)} activities stored",
            extra=log_extra,
        )
    return _acknowledge(outcome)


@router.get("/github")
async def github_webhook_status():
    """
    Static capability payload for manual verification.
    """
    return {
        "status": "ok",
        "message": "GitHub webhook endpoint is ready",
        "supportedEvents": EventDispatcher.supported_events(),
    }
