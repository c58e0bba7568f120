"""
Email delivery for workout notifications.

Implements the NotificationGateway protocol from core.workouts.service.
"""

from .client import (
    EmailConfig,
    MockEmailNotifier,
    SentEmail,
    SmtpEmailNotifier,
    create_email_notifier,
)

__all__ = [
    "EmailConfig",
    "MockEmailNotifier",
    "SentEmail",
    "SmtpEmailNotifier",
    "create_email_notifier",
]
