import smtplib
from email.mime.text import MIMEText
from email.mime.multipart import MIMEMultipart
from typing import Any, Dict

from app.core.config import settings
from app.core.config_loader import get_notification_config
from app.core.logger import logger

# SMTP Configuration
SMTP_SERVER = settings.SMTP_SERVER
SMTP_PORT = settings.SMTP_PORT
SMTP_USERNAME = settings.SMTP_USERNAME
SMTP_PASSWORD = settings.SMTP_PASSWORD

DEFAULT_SUBJECT = "Your appointment at {company_name}"
DEFAULT_TEMPLATE = "Hello {first_name},\n\nYour appointment on {date} at {time} is now {status}.\n\n{company_name}"

def send_email(subject: str, body: str, to_email: str, config: Dict[str, Any]) -> bool:
    """
    Sends a plain-text email over SMTP (STARTTLS).
    Returns: True if sent, False if disabled, unconfigured or the send failed.
    """
    if not get_notification_config(config).get("email_enabled", False):
        logger.info("ℹ️ Email notifications are disabled in config.")
        return False

    if not to_email:
        logger.error("❌ No recipient email given.")
        return False

    if not SMTP_USERNAME or not SMTP_PASSWORD:
        logger.error("❌ SMTP credentials missing (SMTP_USERNAME / SMTP_PASSWORD).")
        return False

    try:
        msg = MIMEMultipart()
        msg['From'] = SMTP_USERNAME
        msg['To'] = to_email
        msg['Subject'] = subject
        msg.attach(MIMEText(body, 'plain'))

        server = smtplib.SMTP(SMTP_SERVER, SMTP_PORT)
        server.starttls()
        server.login(SMTP_USERNAME, SMTP_PASSWORD)
        server.sendmail(SMTP_USERNAME, to_email, msg.as_string())
        server.quit()

        logger.info(f"✅ Email sent to {to_email} with subject: '{subject}'")
        return True
    except (smtplib.SMTPException, OSError) as e:
        logger.error(f"❌ Failed to send email to {to_email}: {e}")
        return False

def send_booking_status_email(booking, config: Dict[str, Any]) -> bool:
    """Tells the visitor the current status of their booking."""
    notif_config = get_notification_config(config)
    values = {
        "company_name": config.get("company_name", ""),
        "first_name": booking.first_name,
        "last_name": booking.last_name,
        "date": booking.date.strftime("%d.%m.%Y"),
        "time": booking.time,
        "status": booking.status,
    }

    try:
        subject = notif_config.get("email_subject", DEFAULT_SUBJECT).format(**values)
        body = notif_config.get("email_template", DEFAULT_TEMPLATE).format(**values)
    except (KeyError, IndexError, ValueError) as e:
        logger.error(f"❌ Bad email template in company config: {e}")
        return False

    return send_email(subject, body, booking.email, config)
