"""Outcome and notification models for POS commands"""

from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime
from enum import Enum


class NotificationKind(str, Enum):
    PROMOTION_INVALID = "promotion_invalid"
    SETTLEMENT_FAILED = "settlement_failed"
    SETTLEMENT_SUCCEEDED = "settlement_succeeded"
    EDIT_SAVED = "edit_saved"


class OutcomeStatus(str, Enum):
    OK = "ok"
    VALIDATION_FAILED = "validation_failed"
    NOT_APPLIED = "not_applied"
    REJECTED = "rejected"
    FAILED = "failed"


class Notification(BaseModel):
    """User-facing message raised by a command"""
    kind: NotificationKind
    message: str
    created_at: datetime = Field(default_factory=datetime.utcnow)


class Outcome(BaseModel):
    """Result of a POS command"""
    status: OutcomeStatus = OutcomeStatus.OK
    notification: Optional[NotificationKind] = None
    error_message: Optional[str] = None
    message: Optional[str] = None
    order_id: Optional[str] = None

    @property
    def success(self) -> bool:
        return self.status == OutcomeStatus.OK

    @classmethod
    def ok(cls, message: Optional[str] = None, **kwargs) -> "Outcome":
        return cls(status=OutcomeStatus.OK, message=message, **kwargs)

    @classmethod
    def validation_failed(cls, error_message: str) -> "Outcome":
        return cls(status=OutcomeStatus.VALIDATION_FAILED, error_message=error_message)

    @classmethod
    def not_applied(
        cls,
        error_message: str,
        notification: Optional[NotificationKind] = None,
    ) -> "Outcome":
        return cls(
            status=OutcomeStatus.NOT_APPLIED,
            error_message=error_message,
            notification=notification,
        )

    @classmethod
    def rejected(cls, error_message: str) -> "Outcome":
        return cls(status=OutcomeStatus.REJECTED, error_message=error_message)

    @classmethod
    def failed(
        cls,
        error_message: str,
        notification: Optional[NotificationKind] = None,
    ) -> "Outcome":
        return cls(
            status=OutcomeStatus.FAILED,
            error_message=error_message,
            notification=notification,
        )

    def to_notification(self) -> Optional[Notification]:
        """Build the notification to show for this outcome, if any"""
        if self.notification is None:
            return None
        return Notification(
            kind=self.notification,
            message=self.message or self.error_message or self.notification.value,
        )
