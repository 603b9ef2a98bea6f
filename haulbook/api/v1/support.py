"""Public support contact form."""

from typing import Annotated

from fastapi import APIRouter, Depends

from haulbook.api.deps import get_notification_dispatcher
from haulbook.core.middleware import support_limiter
from haulbook.schemas.common import ApiResponse
from haulbook.schemas.support import SupportRequest
from haulbook.services.notification_service import NotificationDispatcher

router = APIRouter()


@router.post(
    "/contact", response_model=ApiResponse[None], dependencies=[Depends(support_limiter)]
)
async def submit_support_request(
    request: SupportRequest,
    dispatcher: Annotated[NotificationDispatcher, Depends(get_notification_dispatcher)],
) -> ApiResponse[None]:
    """Forward the form to the support inbox. No authentication required."""
    await dispatcher.support_request(
        name=request.name,
        email=request.email,
        issue_type=request.issue_type,
        subject=request.subject,
        message=request.message,
        phone=request.phone,
    )
    return ApiResponse[None](
        message="Your message has been sent. Our team will get back to you soon."
    )
