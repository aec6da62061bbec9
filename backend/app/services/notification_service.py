"""
Notification Service.

Creates notifications for workflow events and decides which accountant(s)
hear about a client submission.
"""

import logging
from abc import ABC, abstractmethod
from typing import List, Optional

from backend.app.core.exceptions import ResourceNotFoundError, InsufficientPermissionsError
from backend.app.models.enums import UserRole
from backend.app.schemas.notification import NotificationCreate, NotificationRecord
from backend.app.schemas.user import UserRecord
from backend.app.store.base import RecordStore

logger = logging.getLogger("finance.notifications")


class RecipientPolicy(ABC):
    """Resolves which accountants are notified when a client submits a record."""
    
    @abstractmethod
    async def accountant_recipients(self, store: RecordStore, client: UserRecord) -> List[int]:
        ...


class FirstAccountantPolicy(RecipientPolicy):
    """Single-accountant practice: the earliest registered accountant."""
    
    async def accountant_recipients(self, store: RecordStore, client: UserRecord) -> List[int]:
        accountants = await store.users_by_role(UserRole.ACCOUNTANT)
        return [accountants[0].id] if accountants else []


class AllAccountantsPolicy(RecipientPolicy):
    """Every accountant receives every submission."""
    
    async def accountant_recipients(self, store: RecordStore, client: UserRecord) -> List[int]:
        accountants = await store.users_by_role(UserRole.ACCOUNTANT)
        return [a.id for a in accountants]


RECIPIENT_POLICIES = {
    "first": FirstAccountantPolicy,
    "all": AllAccountantsPolicy,
}


def recipient_policy_from_name(name: str) -> RecipientPolicy:
    try:
        return RECIPIENT_POLICIES[name]()
    except KeyError:
        raise ValueError(
            f"Unknown accountant notification policy '{name}' "
            f"(expected one of: {', '.join(sorted(RECIPIENT_POLICIES))})"
        ) from None


class NotificationService:
    
    def __init__(self, store: RecordStore, recipient_policy: Optional[RecipientPolicy] = None):
        self.store = store
        self.recipient_policy = recipient_policy or FirstAccountantPolicy()
    
    async def create_notification(
        self,
        user_id: int,
        title: str,
        message: str,
        link: Optional[str] = None
    ) -> NotificationRecord:
        """Create a single notification."""
        notification = await self.store.create_notification(
            NotificationCreate(user_id=user_id, title=title, message=message, link=link)
        )
        logger.info(
            "Notification created",
            extra={"notification_id": notification.id, "recipient_id": user_id, "link": link}
        )
        return notification
    
    async def notify_accountants(
        self,
        client: UserRecord,
        title: str,
        message: str,
        link: Optional[str] = None
    ) -> List[NotificationRecord]:
        """Notify the accountant(s) chosen by the recipient policy."""
        recipients = await self.recipient_policy.accountant_recipients(self.store, client)
        if not recipients:
            logger.warning("No accountant to notify", extra={"client_id": client.id, "link": link})
        return [
            await self.create_notification(user_id, title, message, link)
            for user_id in recipients
        ]
    
    async def list_for_user(self, user: UserRecord) -> List[NotificationRecord]:
        return await self.store.notifications_by_user(user.id)
    
    async def mark_read(self, notification_id: int, user: UserRecord) -> NotificationRecord:
        """Mark a notification addressed to user as read."""
        notification = await self.store.get_notification(notification_id)
        if notification is None:
            raise ResourceNotFoundError("Notification", notification_id)
        if notification.user_id != user.id:
            raise InsufficientPermissionsError(
                "Access denied. You do not have permission to access this notification."
            )
        if notification.read:
            return notification
        return await self.store.mark_notification_read(notification_id)
    
    async def mark_all_read(self, user: UserRecord) -> int:
        """Mark all notifications for user as read."""
        count = 0
        for notification in await self.store.notifications_by_user(user.id):
            if not notification.read:
                await self.store.mark_notification_read(notification.id)
                count += 1
        return count
