"""
Transactional email over SMTP using fastapi-mail.

Message bodies are Jinja2 templates under ``kitadocs/templates/email``; callers
pass a template name and the variables it needs.
"""
import logging
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict

from fastapi_mail import FastMail, MessageSchema, ConnectionConfig, MessageType

from ..config import settings

# Set up logging
logger = logging.getLogger(__name__)

TEMPLATE_FOLDER = Path(__file__).resolve().parent.parent / "templates" / "email"


def validate_email_config() -> bool:
    """
    Validates that all required email configuration variables are set.

    Returns:
        bool: True if all required config is present, False otherwise
    """
    required_configs = [
        settings.mail_username,
        settings.mail_password,
        settings.mail_from,
        settings.mail_server
    ]

    missing_configs = [config for config in required_configs if not config]

    if missing_configs:
        logger.error(f"Missing email configuration: {len(missing_configs)} items")
        return False

    return True


def build_connection_config() -> ConnectionConfig:
    """Build the fastapi-mail connection settings from application settings"""
    return ConnectionConfig(
        MAIL_USERNAME=settings.mail_username,
        MAIL_PASSWORD=settings.mail_password,
        MAIL_FROM=settings.mail_from,
        MAIL_FROM_NAME=settings.mail_from_name,
        MAIL_PORT=settings.mail_port,
        MAIL_SERVER=settings.mail_server,
        MAIL_STARTTLS=settings.mail_starttls,
        MAIL_SSL_TLS=settings.mail_ssl_tls,
        USE_CREDENTIALS=settings.use_credentials,
        VALIDATE_CERTS=settings.validate_certs,
        SUPPRESS_SEND=1 if settings.mail_suppress_send else 0,
        TEMPLATE_FOLDER=TEMPLATE_FOLDER
    )


class Mailer:
    """Renders an email template and hands the message to SMTP"""

    def __init__(self, config: ConnectionConfig):
        self.fastmail = FastMail(config)

    async def send(self, recipient: str, subject: str, template_name: str, context: Dict[str, Any]) -> None:
        """
        Send one templated HTML email.

        Args:
            recipient: Destination address
            subject: Subject line
            template_name: File name under the template folder, without extension
            context: Variables available to the template

        Raises:
            Exception: Whatever fastapi-mail raises when delivery fails
        """
        message = MessageSchema(
            subject=subject,
            recipients=[recipient],
            template_body=context,
            subtype=MessageType.html
        )
        await self.fastmail.send_message(message, template_name=f"{template_name}.html")
        logger.info(f"Email '{subject}' sent to {recipient}")


@lru_cache()
def get_mailer() -> Mailer:
    if not settings.mail_suppress_send and not validate_email_config():
        logger.warning("Email configuration is incomplete; deliveries will fail until it is fixed")
    return Mailer(build_connection_config())
