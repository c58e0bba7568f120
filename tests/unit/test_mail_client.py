"""
Unit tests for email notification delivery.

SMTP is replaced with an in-process fake so no network is touched.
"""

import smtplib

import pytest

from workout_scheduler.core.workouts.errors import NotificationError
from workout_scheduler.infrastructure.mail.client import (
    EmailConfig,
    MockEmailNotifier,
    SmtpEmailNotifier,
    create_email_notifier,
    render_template,
)


class FakeSMTP:
    """Records what SmtpEmailNotifier does with the connection."""

    instances: list["FakeSMTP"] = []
    fail_with: Exception | None = None

    def __init__(self, host, port, timeout=None):
        self.host = host
        self.port = port
        self.calls: list[tuple] = []
        FakeSMTP.instances.append(self)

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.calls.append(("quit",))
        return False

    def starttls(self):
        self.calls.append(("starttls",))

    def login(self, user, password):
        self.calls.append(("login", user, password))

    def sendmail(self, from_address, recipients, message):
        if FakeSMTP.fail_with is not None:
            raise FakeSMTP.fail_with
        self.calls.append(("sendmail", from_address, list(recipients), message))


@pytest.fixture
def fake_smtp(monkeypatch):
    FakeSMTP.instances = []
    FakeSMTP.fail_with = None
    monkeypatch.setattr(smtplib, "SMTP", FakeSMTP)
    return FakeSMTP


@pytest.fixture
def config() -> EmailConfig:
    return EmailConfig(
        host="smtp.example.com",
        port=2525,
        user="mailer",
        password="secret",
        from_address="schedule@example.com",
    )


# ---------------------------------------------------------------------------
# Templates
# ---------------------------------------------------------------------------

class TestTemplates:

    @pytest.mark.parametrize("template_id", [
        "workoutRequested",
        "workoutUpdated",
        "workoutApproved",
    ])
    def test_known_templates_render(self, template_id):
        assert render_template(template_id).startswith("Hello,")

    def test_template_data_is_appended(self):
        body = render_template("workoutApproved", {"workout_id": 4})

        assert "workout_id: 4" in body

    def test_unknown_template_raises_notification_error(self):
        with pytest.raises(NotificationError, match="Unknown email template") as exc_info:
            render_template("workoutCompleted")

        assert exc_info.value.template_id == "workoutCompleted"


# ---------------------------------------------------------------------------
# SMTP
# ---------------------------------------------------------------------------

class TestSmtpEmailNotifier:

    def test_sends_one_message_to_all_recipients(self, fake_smtp, config):
        notifier = SmtpEmailNotifier(config)

        notifier.send_email(
            "Your workout has been approved",
            ["coach@example.com", "athlete@example.com"],
            "workoutApproved",
        )

        server = fake_smtp.instances[0]
        assert (server.host, server.port) == ("smtp.example.com", 2525)
        assert server.calls[0] == ("starttls",)
        assert server.calls[1] == ("login", "mailer", "secret")

        _, sender, recipients, message = server.calls[2]
        assert sender == "schedule@example.com"
        assert recipients == ["coach@example.com", "athlete@example.com"]
        assert "Subject: Your workout has been approved" in message

    def test_skips_tls_and_login_when_not_configured(self, fake_smtp):
        notifier = SmtpEmailNotifier(EmailConfig(
            host="localhost",
            port=25,
            from_address="schedule@example.com",
            use_tls=False,
        ))

        notifier.send_email("Subject", ["coach@example.com"], "workoutRequested")

        assert [c[0] for c in fake_smtp.instances[0].calls] == ["sendmail", "quit"]

    def test_smtp_failure_becomes_notification_error(self, fake_smtp, config):
        fake_smtp.fail_with = smtplib.SMTPRecipientsRefused({})
        notifier = SmtpEmailNotifier(config)

        with pytest.raises(NotificationError, match="Failed to send email"):
            notifier.send_email("Subject", ["coach@example.com"], "workoutRequested")

    def test_connection_failure_becomes_notification_error(self, monkeypatch, config):
        def refuse(*args, **kwargs):
            raise ConnectionRefusedError("connection refused")

        monkeypatch.setattr(smtplib, "SMTP", refuse)
        notifier = SmtpEmailNotifier(config)

        with pytest.raises(NotificationError):
            notifier.send_email("Subject", ["coach@example.com"], "workoutRequested")

    def test_no_recipients_is_rejected(self, fake_smtp, config):
        with pytest.raises(NotificationError, match="No recipients"):
            SmtpEmailNotifier(config).send_email("Subject", [], "workoutRequested")

        assert fake_smtp.instances == []

    def test_config_requires_host_and_sender(self):
        with pytest.raises(ValueError, match="host"):
            EmailConfig(host="", from_address="a@example.com")
        with pytest.raises(ValueError, match="From address"):
            EmailConfig(host="smtp.example.com", from_address="")


# ---------------------------------------------------------------------------
# Mock
# ---------------------------------------------------------------------------

class TestMockEmailNotifier:

    def test_records_sent_emails(self):
        notifier = MockEmailNotifier()

        notifier.send_email("Subject", ["coach@example.com"], "workoutRequested")

        assert len(notifier.sent) == 1
        assert notifier.sent[0].recipients == ("coach@example.com",)
        assert notifier.sent[0].body

    def test_fail_next_fails_once(self):
        notifier = MockEmailNotifier()
        notifier.fail_next("relay down")

        with pytest.raises(NotificationError, match="relay down"):
            notifier.send_email("Subject", ["coach@example.com"], "workoutRequested")

        notifier.send_email("Subject", ["coach@example.com"], "workoutRequested")
        assert len(notifier.sent) == 1


class TestFactory:

    def test_mock_mode_returns_mock(self):
        assert isinstance(create_email_notifier(mock_mode=True), MockEmailNotifier)

    def test_real_mode_requires_config(self, config):
        with pytest.raises(ValueError, match="config is required"):
            create_email_notifier()

        assert isinstance(create_email_notifier(config=config), SmtpEmailNotifier)
