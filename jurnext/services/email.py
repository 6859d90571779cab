import aiosmtplib
from email.mime.text import MIMEText
from email.mime.multipart import MIMEMultipart
from typing import Optional
import logging

from jurnext.config import Settings

logger = logging.getLogger(__name__)


class EmailService:
    @staticmethod
    async def send_email(settings: Settings, to_email: str, subject: str, html_content: str) -> bool:
        """Send an email using SMTP."""
        if not settings.smtp_user or not settings.smtp_password:
            logger.warning("SMTP not configured, skipping email send")
            return False

        message = MIMEMultipart("alternative")
        message["From"] = settings.smtp_from or settings.smtp_user
        message["To"] = to_email
        message["Subject"] = subject
        message.attach(MIMEText(html_content, "html"))

        try:
            await aiosmtplib.send(
                message,
                hostname=settings.smtp_host,
                port=settings.smtp_port,
                username=settings.smtp_user,
                password=settings.smtp_password,
                start_tls=True
            )
            return True
        except aiosmtplib.SMTPException as e:
            logger.error(f"Failed to send email to {to_email}: {e}")
            return False

    @staticmethod
    async def send_payment_receipt(
        settings: Settings,
        to_email: str,
        name: Optional[str],
        ticket_title: str,
        quantity: int,
        amount: float,
        transaction_id: str
    ) -> bool:
        html_content = f"""
        <html>
        <body style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
            <h1 style="color: #0E7490;">Payment received</h1>
            <p>Hi {name or to_email},</p>
            <p>Your payment for <strong>{quantity}</strong> ticket(s) to <strong>{ticket_title}</strong> went through.</p>
            <p>Amount paid: <strong>${amount:.2f}</strong></p>
            <p style="color: #666;">Transaction: {transaction_id}</p>
            <p>You can find your tickets under My Booked Tickets in your dashboard.</p>
        </body>
        </html>
        """

        return await EmailService.send_email(settings, to_email, f"Your tickets for {ticket_title}", html_content)

    @staticmethod
    async def send_booking_status_update(
        settings: Settings,
        to_email: str,
        name: Optional[str],
        ticket_title: str,
        status: str
    ) -> bool:
        pay_hint = ""
        if status == "accepted":
            pay_hint = f'<p><a href="{settings.client_domain}/dashboard/my-booked-tickets">Pay now</a> to confirm your seats.</p>'

        html_content = f"""
        <html>
        <body style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
            <h1 style="color: #0E7490;">Booking {status}</h1>
            <p>Hi {name or to_email},</p>
            <p>The vendor has marked your booking for <strong>{ticket_title}</strong> as <strong>{status}</strong>.</p>
            {pay_hint}
        </body>
        </html>
        """

        return await EmailService.send_email(settings, to_email, f"Booking update: {ticket_title}", html_content)
