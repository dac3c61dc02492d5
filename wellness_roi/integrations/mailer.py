"""SMTP delivery of the ROI report email with its PDF attachment."""

from __future__ import annotations

import asyncio
import logging
import smtplib
import ssl
from email.message import EmailMessage
from email.utils import formataddr, make_msgid
from typing import Optional

from wellness_roi.config.settings import Settings

from .base import IntegrationOutcome

logger = logging.getLogger(__name__)


def report_subject(company_name: str) -> str:
    return f"Your Corporate Wellness ROI Analysis - {company_name}"


class ReportMailer:
    """Sends the rendered report to a lead over SMTP."""

    def __init__(self, settings: Optional[Settings] = None):
        self._settings = settings or Settings()

    @property
    def is_configured(self) -> bool:
        return bool(self._settings.smtp_host)

    def build_message(
        self,
        to: str,
        subject: str,
        text_body: str,
        html_body: str,
        pdf_bytes: Optional[bytes] = None,
        pdf_filename: str = "Wellness_ROI_Analysis.pdf",
    ) -> EmailMessage:
        s = self._settings
        msg = EmailMessage()
        msg["From"] = formataddr((s.email_from_name, s.email_from_address))
        msg["To"] = to
        msg["Subject"] = subject
        msg["Message-ID"] = make_msgid(domain=s.email_from_address.rpartition("@")[2] or None)
        if s.email_reply_to:
            msg["Reply-To"] = s.email_reply_to

        msg.set_content(text_body)
        msg.add_alternative(html_body, subtype="html")
        if pdf_bytes:
            msg.add_attachment(
                pdf_bytes,
                maintype="application",
                subtype="pdf",
                filename=pdf_filename,
            )
        return msg

    def _deliver(self, msg: EmailMessage) -> None:
        s = self._settings
        if s.smtp_use_ssl:
            context = ssl.create_default_context()
            with smtplib.SMTP_SSL(s.smtp_host, s.smtp_port, context=context) as server:
                if s.smtp_username and s.smtp_password:
                    server.login(s.smtp_username, s.smtp_password)
                server.send_message(msg)
        else:
            with smtplib.SMTP(s.smtp_host, s.smtp_port) as server:
                if s.smtp_use_tls:
                    server.starttls(context=ssl.create_default_context())
                if s.smtp_username and s.smtp_password:
                    server.login(s.smtp_username, s.smtp_password)
                server.send_message(msg)

    async def send(self, msg: EmailMessage) -> IntegrationOutcome:
        """Deliver a built message; SMTP runs in a worker thread."""
        if not self.is_configured:
            logger.warning("SMTP not configured - skipping report email")
            return IntegrationOutcome.failed("SMTP not configured (missing smtp_host)")

        try:
            await asyncio.to_thread(self._deliver, msg)
        except smtplib.SMTPAuthenticationError as e:
            logger.error(f"SMTP auth error: {e}")
            return IntegrationOutcome.failed(f"SMTP authentication failed: {e}")
        except smtplib.SMTPRecipientsRefused as e:
            logger.error(f"SMTP recipients refused: {e}")
            return IntegrationOutcome.failed(f"Recipient refused: {msg['To']}")
        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"SMTP delivery failed: {e}")
            return IntegrationOutcome.failed(f"Email delivery failed: {e}")

        logger.info(f"Report email sent to {msg['To']}")
        return IntegrationOutcome.ok("Email sent", messageId=msg["Message-ID"])
