"""Core enums used across modules."""

from enum import StrEnum


class RoleEnum(StrEnum):
    """System roles."""

    USER = "user"
    MENTOR = "mentor"
    ADMIN = "admin"


class SessionTypeEnum(StrEnum):
    """Coaching session length options."""

    QUICK = "quick"
    STANDARD = "standard"
    EXTENDED = "extended"

    @property
    def duration_minutes(self) -> int:
        return SESSION_DURATION_MINUTES[self]


SESSION_DURATION_MINUTES: dict[SessionTypeEnum, int] = {
    SessionTypeEnum.QUICK: 30,
    SessionTypeEnum.STANDARD: 60,
    SessionTypeEnum.EXTENDED: 90,
}


class PaymentStatusEnum(StrEnum):
    """Payment processing status."""

    PENDING = "pending"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class NextActionEnum(StrEnum):
    """What the client should do after a session is booked."""

    REDIRECT_TO_PAYMENT = "redirect_to_payment"
    MANUAL_PAYMENT = "manual_payment"
