"""Outgoing mail - temporary passwords for registration and password resets."""
import logging

import httpx
from flask import current_app

from skillmetrix.errors import EmailDeliveryError

logger = logging.getLogger(__name__)

TEMPORARY_PASSWORD_HTML = """
<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto; padding: 20px;">
  <h2>Your Temporary Password</h2>
  <p>You have requested access to the Skills Tracking Platform.</p>
  <p>Here is your temporary password:</p>
  <p style="font-size: 18px; font-weight: bold; letter-spacing: 1px;">{password}</p>
  <p>Please sign in and change it from your profile page.</p>
</div>
"""


def send_email(to, subject, html_body, text_body):
    """
    Deliver one message through the configured HTTP mail API.

    With MAIL_SUPPRESS_SEND the message is only logged.
    """
    cfg = current_app.config
    if cfg.get('MAIL_SUPPRESS_SEND'):
        logger.info('Email (not sent) to=%s subject=%r\n%s', to, subject, text_body)
        return False

    if not cfg.get('MAIL_API_KEY'):
        raise EmailDeliveryError('MAIL_API_KEY is not configured')

    payload = {
        'from': cfg['MAIL_FROM'],
        'to': [to],
        'subject': subject,
        'html': html_body,
        'text': text_body,
    }
    try:
        response = httpx.post(
            cfg['MAIL_API_URL'],
            json=payload,
            headers={'Authorization': f'Bearer {cfg["MAIL_API_KEY"]}'},
            timeout=10.0,
        )
        response.raise_for_status()
    except httpx.HTTPError as exc:
        raise EmailDeliveryError(f'Failed to send email to {to}: {exc}') from exc

    logger.info('Email sent to %s (%s)', to, subject)
    return True


def send_temporary_password_email(email, temporary_password):
    return send_email(
        email,
        'Your Temporary Password',
        TEMPORARY_PASSWORD_HTML.format(password=temporary_password),
        f'Your temporary password is: {temporary_password}',
    )
