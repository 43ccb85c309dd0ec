import logging
import smtplib
from email.message import EmailMessage

from hiredready.config import EMAIL_FROM, EMAIL_HOST, EMAIL_PASS, EMAIL_PORT, EMAIL_USER

logger = logging.getLogger(__name__)


class EmailDeliveryError(Exception):
    pass


def send_email(to: str, subject: str, html: str):
    msg = EmailMessage()
    msg["From"] = EMAIL_FROM
    msg["To"] = to
    msg["Subject"] = subject
    msg.set_content("This message requires an HTML-capable mail client.")
    msg.add_alternative(html, subtype="html")

    try:
        with smtplib.SMTP_SSL(EMAIL_HOST, EMAIL_PORT, timeout=15) as smtp:
            if EMAIL_USER:
                smtp.login(EMAIL_USER, EMAIL_PASS)
            smtp.send_message(msg)
    except (smtplib.SMTPException, OSError) as exc:
        logger.error("Error sending email to %s: %s", to, exc)
        raise EmailDeliveryError("There was an error sending the email. Try again later.") from exc
    logger.info("Email sent to %s", to)
