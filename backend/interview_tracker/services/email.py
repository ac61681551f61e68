from __future__ import annotations

import logging
import re
from html import unescape

import boto3
import resend
from botocore.exceptions import BotoCoreError, ClientError, EndpointConnectionError, NoCredentialsError

from interview_tracker.core.config import settings

logger = logging.getLogger(__name__)

_TAG_RE = re.compile(r"<[^>]+>")


class EmailNotConfiguredError(RuntimeError):
    pass


class EmailDeliveryError(RuntimeError):
    """
    Raised when a provider is configured but delivery fails.
    """


def _normalize_provider(raw: str | None) -> str:
    """
    Supported providers:
    - resend (default when unset)
    - ses
    """
    provider = (raw or "").strip().lower()
    if not provider:
        return "resend"
    if provider in {"resend", "ses"}:
        return provider
    raise EmailNotConfiguredError(
        f"Unsupported EMAIL_PROVIDER={provider!r}. Supported: resend (default), ses."
    )


def _require_from_email() -> str:
    if not settings.FROM_EMAIL:
        raise EmailNotConfiguredError("FROM_EMAIL is not set")
    return settings.FROM_EMAIL


def _require_ses_config() -> tuple[str, str]:
    region = (settings.AWS_REGION or "").strip()
    if not region:
        raise EmailNotConfiguredError("AWS_REGION is not set (required for SES)")
    return region, _require_from_email()


def _require_resend_config() -> tuple[str, str]:
    api_key = (settings.RESEND_API_KEY or "").strip()
    if not api_key:
        raise EmailNotConfiguredError("RESEND_API_KEY is not set")
    return api_key, _require_from_email()


def html_to_text(html: str) -> str:
    """Crude plain-text alternative for clients that don't render HTML."""
    text = _TAG_RE.sub("", html.replace("<br>", "\n").replace("</li>", "\n").replace("</p>", "\n"))
    lines = [unescape(line).strip() for line in text.splitlines()]
    return "\n".join(line for line in lines if line)


def _send_email_ses(to_email: str, subject: str, html: str, text: str) -> str | None:
    region, from_email = _require_ses_config()
    client = boto3.client("ses", region_name=region)

    try:
        res = client.send_email(
            Source=from_email,
            Destination={"ToAddresses": [to_email]},
            Message={
                "Subject": {"Data": subject, "Charset": "UTF-8"},
                "Body": {
                    "Html": {"Data": html, "Charset": "UTF-8"},
                    "Text": {"Data": text, "Charset": "UTF-8"},
                },
            },
        )
        msg_id = res.get("MessageId")
        logger.info("SES email sent: to=%s msg_id=%s", to_email, msg_id)
        return msg_id
    except NoCredentialsError as e:
        logger.exception("SES email failed (no AWS credentials)")
        raise EmailDeliveryError("SES email failed: AWS credentials not available") from e
    except EndpointConnectionError as e:
        logger.exception("SES email failed (endpoint connection)")
        raise EmailDeliveryError("SES email failed: could not connect to SES endpoint") from e
    except ClientError as e:
        logger.exception("SES email failed (client error)")
        code = (e.response or {}).get("Error", {}).get("Code", "ClientError")
        raise EmailDeliveryError(f"SES email failed: {code}") from e
    except BotoCoreError as e:
        logger.exception("SES email failed (botocore)")
        raise EmailDeliveryError("SES email failed") from e


def _send_email_resend(to_email: str, subject: str, html: str, text: str) -> str | None:
    api_key, from_email = _require_resend_config()

    payload = {
        "from": from_email,
        "to": [to_email],
        "subject": subject,
        "html": html,
        "text": text,
    }

    try:
        resend.api_key = api_key
        res = resend.Emails.send(payload)  # type: ignore[attr-defined]
    except Exception as e:  # noqa: BLE001
        raise EmailDeliveryError(f"Resend send failed: {e}") from e

    msg_id: str | None = None
    if isinstance(res, dict):
        if res.get("error"):
            raise EmailDeliveryError(f"Resend API error: {res.get('error')}")
        v = res.get("id")
        if isinstance(v, str) and v.strip():
            msg_id = v.strip()

    logger.info("Resend email sent: to=%s msg_id=%s", to_email, msg_id)
    return msg_id


def send_email(to_email: str, subject: str, html: str, text: str | None = None) -> str | None:
    """
    Sends an HTML email using the configured provider and returns the provider message id.
    - EMAIL_ENABLED=false: no-op (logged), returns None
    - EMAIL_PROVIDER=resend (default): Resend API
    - EMAIL_PROVIDER=ses: AWS SES via boto3
    Raises EmailNotConfiguredError / EmailDeliveryError; callers decide whether to retry.
    """
    if not settings.EMAIL_ENABLED:
        logger.info("Email disabled; not sending %r to %s", subject, to_email)
        return None

    provider = _normalize_provider(settings.EMAIL_PROVIDER)
    plain = text if text is not None else html_to_text(html)
    if provider == "ses":
        return _send_email_ses(to_email=to_email, subject=subject, html=html, text=plain)
    return _send_email_resend(to_email=to_email, subject=subject, html=html, text=plain)
