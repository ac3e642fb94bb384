import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse, PlainTextResponse
from pydantic import ValidationError as PydanticValidationError

from synathrozo.dispatch.dtos import NotificationPayload
from synathrozo.email_service import get_email_service
from synathrozo.email_service.base import EmailServiceBase
from synathrozo.urls import SEND_INVITATION_EMAIL_URL
from synathrozo.validation import is_valid_email

logger = logging.getLogger(__name__)

router = APIRouter()

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
}

REQUIRED_FIELDS_ERROR = "Missing required fields: to, eventTitle, eventDate, rsvpLink"


class EmailRequestError(Exception):
    pass


def _failure(message: str) -> JSONResponse:
    return JSONResponse({"success": False, "error": message}, status_code=400, headers=CORS_HEADERS)


async def _parse_payload(request: Request) -> NotificationPayload:
    try:
        payload = NotificationPayload.model_validate(await request.json())
    except (ValueError, PydanticValidationError):
        raise EmailRequestError("Invalid request body")

    if not (payload.to and payload.event_title and payload.event_date and payload.rsvp_link):
        raise EmailRequestError(REQUIRED_FIELDS_ERROR)
    if not is_valid_email(payload.to):
        raise EmailRequestError(f"Invalid email address: {payload.to}")
    return payload


@router.options(SEND_INVITATION_EMAIL_URL)
async def send_invitation_email_probe() -> PlainTextResponse:
    """CORS preflight, also used by clients as a reachability probe."""
    return PlainTextResponse("ok", headers=CORS_HEADERS)


@router.post(SEND_INVITATION_EMAIL_URL)
async def send_invitation_email(
    request: Request,
    email_service: EmailServiceBase = Depends(get_email_service),
) -> JSONResponse:
    """
    Render an invitation (or RSVP confirmation) email and send it.

    Responds with {success: true, id} or, on any failure, 400 {success: false, error}.
    """
    try:
        payload = await _parse_payload(request)
        message_id = await email_service.send_invitation(payload)
    except Exception as e:
        logger.error(f"Send invitation email failed: {e}")
        return _failure(str(e) or "Failed to send email")

    return JSONResponse({"success": True, "id": message_id}, headers=CORS_HEADERS)
