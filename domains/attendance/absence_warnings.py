"""Consecutive-absence warnings, delivered through the shared notification feed."""

from typing import Iterable, Optional

from domains.notifications import (
    Notification,
    NotificationCategory,
    NotificationDelivery,
    NotificationPriority,
)
from logger import logger
from utils.redact import describe_error
from . import config


class AttendanceWarningNotifier:
    """Warns a member (and the club admins) once their absence streak hits the threshold."""

    def __init__(self, delivery: NotificationDelivery, threshold: Optional[int] = None):
        self.delivery = delivery
        self.threshold = threshold or config.WARNING_THRESHOLD

    def should_warn(self, consecutive_missed: int) -> bool:
        # Only at the crossing, not on every further miss
        return consecutive_missed == self.threshold

    async def record_absences(
        self,
        member_id: str,
        club_id: str,
        club_name: str,
        consecutive_missed: int
    ) -> bool:
        """Send the member warning if this streak length warrants one.

        Returns:
            True if a warning was sent
        """
        if not self.should_warn(consecutive_missed):
            return False

        notification = Notification(
            title="Attendance Warning",
            message=(
                f"You have missed {consecutive_missed} consecutive meetings in {club_name}. "
                f"Please improve your attendance or contact the admin."
            ),
            category=NotificationCategory.ATTENDANCE_WARNING,
            priority=NotificationPriority.HIGH,
            payload={
                "clubId": club_id,
                "clubName": club_name,
                "consecutiveCount": consecutive_missed,
            },
        )
        await self.delivery.deliver(
            member_id,
            notification,
            dedupe_key=f"attendance-warning-{club_id}-{member_id}",
        )
        logger.info(f"Attendance warning sent to {member_id} ({consecutive_missed} missed in {club_name})")
        return True

    async def notify_admins(
        self,
        admin_ids: Iterable[str],
        member_id: str,
        member_name: str,
        club_id: str,
        club_name: str,
        consecutive_missed: int
    ) -> int:
        """Tell each club admin a member was warned.

        Returns:
            Number of admins notified
        """
        notification = Notification(
            title="Member Attendance Warning",
            message=f"{member_name} has missed {consecutive_missed} consecutive meetings and has been warned.",
            category=NotificationCategory.MEMBER_ATTENDANCE_WARNING,
            payload={
                "clubId": club_id,
                "clubName": club_name,
                "memberId": member_id,
                "memberName": member_name,
                "consecutiveCount": consecutive_missed,
            },
        )

        notified = 0
        for admin_id in dict.fromkeys(admin_ids):
            try:
                await self.delivery.deliver(admin_id, notification)
                notified += 1
            except Exception as e:
                logger.error(f"Failed to notify admin {admin_id} about {member_id}: {describe_error(e)}")

        return notified
