"""Status transition engine for application review.

Only officials may change a status. The target must be one of the four
persisted states; the engine does not restrict the originating state. A
Rejected target needs a non-empty reason unless the policy is switched
off; any other target clears the stored reason. Concurrent updates to
the same application are last-write-wins.
"""


import logging

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import ForbiddenError, NotFoundError, ValidationError
from app.core.security import Identity
from app.domain.enums import ApplicationStatus
from app.repositories.application import ApplicationRepository

logger = logging.getLogger(__name__)


def parse_status(value: str | None) -> ApplicationStatus:
    try:
        return ApplicationStatus(value)
    except ValueError:
        allowed = ", ".join(s.value for s in ApplicationStatus)
        raise ValidationError(f"Invalid status '{value}'. Expected one of: {allowed}") from None


class StatusTransitionService:
    def __init__(self, session: AsyncSession, *, require_rejection_reason: bool = True):
        self._repo = ApplicationRepository(session)
        self._require_reason = require_rejection_reason

    async def change_status(
        self,
        actor: Identity,
        application_id: int,
        new_status: str | None,
        rejection_reason: str | None = None,
    ) -> ApplicationStatus:
        if not actor.is_official:
            raise ForbiddenError("Official privilege required")

        status = parse_status(new_status)
        reason = (rejection_reason or "").strip() or None
        if status is ApplicationStatus.REJECTED:
            if reason is None and self._require_reason:
                raise ValidationError("A rejection reason is required")
        else:
            reason = None

        updated = await self._repo.set_status(application_id, status, reason)
        if not updated:
            raise NotFoundError("Application", application_id)

        logger.info(
            "Application %s set to %s by %s%s",
            application_id, status.value, actor.public_id,
            f" ({actor.official_title})" if actor.official_title else "",
        )
        return status
