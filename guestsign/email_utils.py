# guestsign/email_utils.py
import logging
import smtplib
from email.message import EmailMessage
from html import escape

from flask import current_app

from .errors import EmailDeliveryError

logger = logging.getLogger(__name__)

SIGNING_SUBJECT = "Digital Signature Request"


def _smtp_config():
    cfg = current_app.config
    host, user, password = cfg.get("SMTP_HOST"), cfg.get("SMTP_USER"), cfg.get("SMTP_PASS")
    if not host or not user or not password:
        raise EmailDeliveryError("SMTP configuration is incomplete")
    return host, int(cfg.get("SMTP_PORT", 587)), user, password, bool(cfg.get("SMTP_SECURE"))


def build_signing_message(to_addr: str, name: str, url: str, sender: str) -> EmailMessage:
    msg = EmailMessage()
    msg["Subject"] = SIGNING_SUBJECT
    msg["From"] = sender
    msg["To"] = to_addr
    msg.set_content(
        f"Hello {name},\n\n"
        f"You have been invited to sign a document. Open the link below to review and sign it:\n"
        f"{url}\n"
    )
    msg.add_alternative(
        f"<p>Hello {escape(name)},</p>"
        f"<p>You have been invited to sign a document.</p>"
        f'<p><a href="{escape(url, quote=True)}">Review and sign the document</a></p>',
        subtype="html",
    )
    return msg


def send_message(msg: EmailMessage):
    host, port, user, password, secure = _smtp_config()
    to_addr = msg["To"]
    try:
        if secure:
            with smtplib.SMTP_SSL(host, port) as smtp:
                smtp.login(user, password)
                smtp.send_message(msg)
        else:
            with smtplib.SMTP(host, port) as smtp:
                smtp.starttls()
                smtp.login(user, password)
                smtp.send_message(msg)
        logger.info(f"Email sent to {to_addr}")
    except (smtplib.SMTPException, OSError) as e:
        logger.error(f"Failed to send email to {to_addr}: {e}")
        raise EmailDeliveryError(f"Failed to send email: {e}") from e


def send_signing_link(to_addr: str, name: str, url: str):
    # envoi du lien de signature a l invite
    _smtp_config()
    sender = current_app.config.get("MAIL_FROM") or current_app.config["SMTP_USER"]
    send_message(build_signing_message(to_addr, name or "Guest", url, sender))
