from fastapi import APIRouter

from synathrozo.dispatch.router import router as dispatch_router
from synathrozo.email_service.router import router as email_function_router
from synathrozo.events.router import router as events_router
from synathrozo.invitations.router import router as invitations_router
from synathrozo.invitations.rsvp_router import router as rsvp_router

router = APIRouter()

router.include_router(events_router, tags=["Events"])
router.include_router(invitations_router, tags=["Invitations"])
router.include_router(dispatch_router, tags=["Dispatch"])
router.include_router(rsvp_router, tags=["RSVP"])
router.include_router(email_function_router, tags=["Email function"])
