from synathrozo.config.settings import settings
from synathrozo.email_service.base import EmailServiceBase
from synathrozo.email_service.resend_service import ResendEmailService
from synathrozo.email_service.templates import EmailTemplates


def get_email_service() -> EmailServiceBase:
    return ResendEmailService(config=settings)


__all__ = [
    "EmailServiceBase",
    "EmailTemplates",
    "get_email_service",
]
