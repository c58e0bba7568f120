"""
Email delivery for workout notifications.

Implements the NotificationGateway protocol from core.workouts.service.
The service only knows template ids; this module owns what those templates
say and how the message leaves the building.

Two implementations:
- SmtpEmailNotifier: sends through an SMTP relay with smtplib
- MockEmailNotifier: records messages in memory for local dev and tests
"""

import logging
import smtplib
from dataclasses import dataclass, field
from datetime import datetime, timezone
from email.mime.text import MIMEText
from typing import Any, Optional, Union

from workout_scheduler.core.workouts.errors import NotificationError
from workout_scheduler.core.workouts.service import (
    WORKOUT_APPROVED_TEMPLATE,
    WORKOUT_REQUESTED_TEMPLATE,
    WORKOUT_UPDATED_TEMPLATE,
)

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Templates
# ---------------------------------------------------------------------------

TEMPLATES: dict[str, str] = {
    WORKOUT_REQUESTED_TEMPLATE: (
        "Hello,\n\n"
        "An athlete has requested a new workout with you. "
        "Open your schedule to review and approve it.\n"
        "{details}"
    ),
    WORKOUT_UPDATED_TEMPLATE: (
        "Hello,\n\n"
        "One of your workouts has been updated. "
        "Check your schedule for the new time and description.\n"
        "{details}"
    ),
    WORKOUT_APPROVED_TEMPLATE: (
        "Hello,\n\n"
        "Your workout has been approved and is now on the schedule.\n"
        "{details}"
    ),
}


def render_template(
    template_id: str,
    template_data: Optional[dict[str, Any]] = None,
) -> str:
    """
    Render a template body.

    Template data, when given, is appended as "key: value" lines. The
    service currently never passes any, so bodies are usually static.

    Raises:
        NotificationError: if the template id is unknown
    """
    try:
        template = TEMPLATES[template_id]
    except KeyError:
        raise NotificationError(
            f"Unknown email template: {template_id}",
            template_id=template_id,
        ) from None

    details = ""
    if template_data:
        lines = [f"{key}: {value}" for key, value in sorted(template_data.items())]
        details = "\n" + "\n".join(lines) + "\n"

    return template.format(details=details)


# ---------------------------------------------------------------------------
# SMTP
# ---------------------------------------------------------------------------

@dataclass
class EmailConfig:
    """Configuration for the SMTP relay."""
    host: str
    from_address: str
    port: int = 587
    user: str = ""
    password: str = ""
    use_tls: bool = True
    timeout_seconds: float = 10.0

    def __post_init__(self) -> None:
        if not self.host:
            raise ValueError("SMTP host is required")
        if not self.from_address:
            raise ValueError("From address is required")


class SmtpEmailNotifier:
    """
    NotificationGateway backed by an SMTP relay.

    Opens one connection per email. Workout notifications are rare enough
    that pooling connections isn't worth the reconnect handling.
    """

    def __init__(self, config: EmailConfig) -> None:
        self._config = config

    def send_email(
        self,
        subject: str,
        recipients: list[str],
        template_id: str,
        template_data: Optional[dict[str, Any]] = None,
    ) -> None:
        if not recipients:
            raise NotificationError("No recipients given", template_id=template_id)

        body = render_template(template_id, template_data)

        msg = MIMEText(body, "plain", "utf-8")
        msg["Subject"] = subject
        msg["From"] = self._config.from_address
        msg["To"] = ", ".join(recipients)

        try:
            with smtplib.SMTP(
                self._config.host,
                self._config.port,
                timeout=self._config.timeout_seconds,
            ) as server:
                if self._config.use_tls:
                    server.starttls()
                if self._config.user:
                    server.login(self._config.user, self._config.password)
                server.sendmail(self._config.from_address, recipients, msg.as_string())

        except (smtplib.SMTPException, OSError) as e:
            logger.error(
                "SMTP delivery failed",
                extra={
                    "template_id": template_id,
                    "recipient_count": len(recipients),
                    "error": str(e),
                }
            )
            raise NotificationError(
                f"Failed to send email: {e}",
                template_id=template_id,
            ) from e

        logger.info(
            "Email sent",
            extra={"template_id": template_id, "recipient_count": len(recipients)}
        )


# ---------------------------------------------------------------------------
# Mock Notifier for Local Development
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class SentEmail:
    """An email captured by MockEmailNotifier."""
    subject: str
    recipients: tuple[str, ...]
    template_id: str
    template_data: Optional[dict[str, Any]] = None
    body: str = ""
    sent_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


class MockEmailNotifier:
    """
    In-memory NotificationGateway.

    Stores every email instead of sending it. Call `fail_next` to make
    the next send raise, which is how tests exercise the
    persisted-but-not-notified path.
    """

    def __init__(self) -> None:
        self.sent: list[SentEmail] = []
        self._failure: Optional[NotificationError] = None

        logger.info("Initialized mock email notifier (in-memory)")

    def send_email(
        self,
        subject: str,
        recipients: list[str],
        template_id: str,
        template_data: Optional[dict[str, Any]] = None,
    ) -> None:
        if self._failure is not None:
            failure, self._failure = self._failure, None
            raise failure

        body = render_template(template_id, template_data)
        self.sent.append(SentEmail(
            subject=subject,
            recipients=tuple(recipients),
            template_id=template_id,
            template_data=template_data,
            body=body,
        ))

        logger.debug(
            "Mock email recorded",
            extra={"template_id": template_id, "recipients": list(recipients)}
        )

    def fail_next(self, message: str = "Mock delivery failure") -> None:
        """Make the next send_email call raise NotificationError."""
        self._failure = NotificationError(message)

    def clear(self) -> None:
        self.sent.clear()
        self._failure = None


# ---------------------------------------------------------------------------
# Factory Function
# ---------------------------------------------------------------------------

def create_email_notifier(
    config: Optional[EmailConfig] = None,
    mock_mode: bool = False,
) -> Union[SmtpEmailNotifier, MockEmailNotifier]:
    """
    Create an email notifier based on configuration.

    Args:
        config: SMTP configuration (required if not mock_mode)
        mock_mode: If True, return an in-memory notifier
    """
    if mock_mode:
        return MockEmailNotifier()

    if config is None:
        raise ValueError("config is required when not in mock mode")

    return SmtpEmailNotifier(config)
