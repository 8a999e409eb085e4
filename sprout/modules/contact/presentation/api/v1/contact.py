# 📄 File: sprout/modules/contact/presentation/api/v1/contact.py
# 🧭 Purpose (Layman Explanation):
# The "Contact us" form endpoint, limited to a few messages a minute per visitor.
#
# 🧪 Purpose (Technical Summary):
# Public FastAPI route over ContactService with a slowapi rate limit.
#
# 🔗 Dependencies:
# - FastAPI router, slowapi limiter, ContactService
#
# 🔄 Connected Modules / Calls From:
# - sprout.api.v1.router

from fastapi import APIRouter, Depends, Request

from sprout.modules.contact.domain.services.contact_service import ContactService
from sprout.modules.contact.presentation.api.schemas.contact_schemas import (
    ContactRequest,
    ContactResponse,
)
from sprout.shared.config.settings import get_settings
from sprout.shared.core.rate_limiter import limiter

router = APIRouter(prefix="/contact", tags=["Contact"])

CONTACT_RATE_LIMIT = get_settings().CONTACT_RATE_LIMIT


@router.post(
    "",
    response_model=ContactResponse,
    summary="Send a message to the Sprout team",
    responses={
        429: {"description": "Too many messages"},
        500: {"description": "Email service is not configured"},
        502: {"description": "Failed to send message"},
    },
)
@limiter.limit(CONTACT_RATE_LIMIT)
async def send_contact_message(
    request: Request,
    contact: ContactRequest,
    contact_service: ContactService = Depends(),
) -> ContactResponse:
    return ContactResponse(message=await contact_service.send_contact_email(contact))
