import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from email.utils import formataddr
from journey.core.config import settings

SENDER_NAME = settings.APP_NAME
SENDER_EMAIL = settings.MAIL_FROM


def _connect() -> smtplib.SMTP:
    if settings.SMTP_USE_SSL:
        return smtplib.SMTP_SSL(settings.SMTP_HOST, settings.SMTP_PORT, timeout=30)
    return smtplib.SMTP(settings.SMTP_HOST, settings.SMTP_PORT, timeout=30)


def send_email_html(to_email: str, subject: str, html: str, text: str) -> None:
    """Blocking SMTP send, run it off the event loop."""
    msg = MIMEMultipart("alternative")
    msg["Subject"] = subject
    msg["From"] = formataddr((SENDER_NAME, SENDER_EMAIL))
    msg["To"] = to_email
    msg.attach(MIMEText(text, "plain"))
    msg.attach(MIMEText(html, "html"))

    with _connect() as server:
        if settings.SMTP_USER:
            server.login(settings.SMTP_USER, settings.SMTP_PASSWORD)
        server.sendmail(SENDER_EMAIL, [to_email], msg.as_string())
