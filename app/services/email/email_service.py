# ===== app/services/email/email_service.py =====
import smtplib
from datetime import datetime
from email.mime.text import MIMEText
from email.mime.multipart import MIMEMultipart
from typing import Optional
import logging

from app.config.settings import settings

logger = logging.getLogger(__name__)


class EmailService:
    """Service for sending booking emails via SMTP"""

    @staticmethod
    def _get_smtp_connection():
        """Create and return SMTP connection"""
        try:
            if settings.EMAIL_USE_TLS:
                server = smtplib.SMTP(settings.EMAIL_HOST, settings.EMAIL_PORT)
                server.starttls()
            else:
                server = smtplib.SMTP_SSL(settings.EMAIL_HOST, settings.EMAIL_PORT)

            if settings.EMAIL_USERNAME and settings.EMAIL_PASSWORD:
                server.login(settings.EMAIL_USERNAME, settings.EMAIL_PASSWORD)

            return server
        except Exception as e:
            logger.error(f"Failed to connect to SMTP server: {e}")
            raise

    @staticmethod
    def send_email(
            to_email: str,
            subject: str,
            html_content: str,
            plain_text: Optional[str] = None
    ) -> bool:
        """
        Send an email using SMTP

        Args:
            to_email: Recipient email address
            subject: Email subject
            html_content: HTML content of the email
            plain_text: Plain text version (fallback for non-HTML clients)

        Returns:
            bool: True if email sent successfully
        """
        try:
            msg = MIMEMultipart('alternative')
            msg['Subject'] = subject
            msg['From'] = f"{settings.EMAIL_FROM_NAME} <{settings.EMAIL_FROM_ADDRESS}>"
            msg['To'] = to_email

            if plain_text:
                msg.attach(MIMEText(plain_text, 'plain'))
            msg.attach(MIMEText(html_content, 'html'))

            server = EmailService._get_smtp_connection()
            server.sendmail(settings.EMAIL_FROM_ADDRESS, [to_email], msg.as_string())
            server.quit()

            logger.info(f"Email sent successfully to {to_email}")
            return True

        except Exception as e:
            logger.error(f"Failed to send email to {to_email}: {e}")
            raise

    @staticmethod
    def _render(title: str, greeting: str, body: str) -> str:
        return f"""
        <!DOCTYPE html>
        <html>
        <head>
            <meta charset="UTF-8">
            <meta name="viewport" content="width=device-width, initial-scale=1.0">
        </head>
        <body style="font-family: Arial, sans-serif; line-height: 1.6; color: #333; max-width: 600px; margin: 0 auto; padding: 20px;">
            <div style="background: linear-gradient(135deg, #667eea 0%, #764ba2 100%); padding: 30px; text-align: center; border-radius: 10px 10px 0 0;">
                <h1 style="color: white; margin: 0; font-size: 28px;">{title}</h1>
            </div>

            <div style="background-color: #ffffff; padding: 30px; border: 1px solid #e0e0e0; border-top: none; border-radius: 0 0 10px 10px;">
                <h2 style="color: #333; margin-top: 0;">{greeting}</h2>
                <p style="font-size: 16px; color: #555;">{body}</p>
                <div style="text-align: center; margin: 30px 0;">
                    <a href="{settings.FRONTEND_URL}/bookings"
                       style="background: linear-gradient(135deg, #667eea 0%, #764ba2 100%);
                              color: white;
                              padding: 14px 40px;
                              text-decoration: none;
                              border-radius: 5px;
                              font-weight: bold;
                              display: inline-block;
                              font-size: 16px;">
                        View Bookings
                    </a>
                </div>
            </div>
        </body>
        </html>
        """

    @staticmethod
    def _format_start(start_time: datetime) -> str:
        return start_time.strftime("%A, %d %B %Y at %H:%M UTC")

    @staticmethod
    def send_booking_request_email(
            email: str,
            service_name: str,
            start_time: datetime,
            customer_name: Optional[str] = None
    ) -> bool:
        """Tell the business a booking is waiting for confirmation"""
        when = EmailService._format_start(start_time)
        who = customer_name or "A customer"
        body = f"{who} requested {service_name} on {when}. Please confirm or reject the booking."

        return EmailService.send_email(
            to_email=email,
            subject="New Booking Request",
            html_content=EmailService._render("New Booking Request", "Hello!", body),
            plain_text=f"You have a new booking request. {body}"
        )

    @staticmethod
    def send_booking_confirmation_email(
            email: str,
            service_name: str,
            start_time: datetime,
            user_name: Optional[str] = None
    ) -> bool:
        """Tell the customer the business confirmed the booking"""
        when = EmailService._format_start(start_time)
        body = f"Your booking for {service_name} on {when} has been confirmed."

        return EmailService.send_email(
            to_email=email,
            subject="Your Booking is Confirmed",
            html_content=EmailService._render("Booking Confirmed", f"Hi {user_name or 'there'}!", body),
            plain_text=body
        )

    @staticmethod
    def send_booking_rejection_email(
            email: str,
            service_name: str,
            start_time: datetime,
            user_name: Optional[str] = None
    ) -> bool:
        """Tell the customer the booking was rejected or canceled"""
        when = EmailService._format_start(start_time)
        body = f"Your booking for {service_name} on {when} was rejected."

        return EmailService.send_email(
            to_email=email,
            subject="Your Booking is Rejected",
            html_content=EmailService._render("Booking Rejected", f"Hi {user_name or 'there'}!", body),
            plain_text=body
        )
