"""
Email notifications.

Only one message exists today: the welcome email sent after
registration. Delivery goes over SMTP (STARTTLS) on a daemon thread so
the register request returns immediately; a failed delivery is logged
and otherwise ignored, since the account already exists.

Nothing is sent when MAIL_USERNAME / MAIL_PASSWORD are unset (local
development and tests).
"""

import logging
import smtplib
import threading
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText

from flask import current_app, render_template

logger = logging.getLogger(__name__)


def _smtp_settings(config):
    return {
        "host": config.get("MAIL_SMTP_HOST", "smtp.gmail.com"),
        "port": config.get("MAIL_SMTP_PORT", 587),
        "username": config.get("MAIL_USERNAME"),
        "password": config.get("MAIL_PASSWORD"),
    }


def _deliver(settings, msg):
    try:
        with smtplib.SMTP(settings["host"], settings["port"], timeout=30) as server:
            server.starttls()
            server.login(settings["username"], settings["password"])
            server.send_message(msg)
    except (smtplib.SMTPException, OSError) as e:
        logger.error(f"Email to {msg['To']} failed: {e}")
        return False
    logger.info(f"Sent \"{msg['Subject']}\" to {msg['To']}")
    return True


def build_message(config, to, subject, html_body, text_body):
    sender = config.get("MAIL_FROM_ADDRESS") or config.get("MAIL_USERNAME")
    msg = MIMEMultipart("alternative")
    msg["Subject"] = subject
    msg["From"] = f"{config.get('MAIL_FROM_NAME', 'Taskboard')} <{sender}>"
    msg["To"] = to
    # Clients show the last part they can render, so HTML goes last.
    msg.attach(MIMEText(text_body, "plain"))
    msg.attach(MIMEText(html_body, "html"))
    return msg


def send_email(to, subject, template, context=None, text_body="", background=True):
    """Render `template` and send it to `to`.

    Returns False when mail is not configured, True once the message
    is handed to the sender thread (or delivered, with
    background=False).
    """
    config = current_app.config
    settings = _smtp_settings(config)
    if not settings["username"] or not settings["password"]:
        logger.warning(f"Mail not configured; skipped \"{subject}\" to {to}")
        return False

    html_body = render_template(template, **(context or {}))
    msg = build_message(config, to, subject, html_body, text_body)

    if not background:
        return _deliver(settings, msg)
    threading.Thread(target=_deliver, args=(settings, msg), daemon=True).start()
    return True


def send_welcome_email(user):
    base_url = current_app.config["APP_BASE_URL"]
    return send_email(
        to=user.email,
        subject="Welcome to Taskboard!",
        template="emails/welcome.html",
        context={
            "full_name": user.full_name,
            "email": user.email,
            "app_base_url": base_url,
        },
        text_body=(
            f"Hi {user.full_name},\n\n"
            f"Your Taskboard account ({user.email}) is ready.\n"
            f"Open {base_url} to create your first board.\n"
        ),
    )
