from pydantic import EmailStr, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from synathrozo.results import ValidationError

_email_adapter = TypeAdapter(EmailStr)


def is_valid_email(value: str | None) -> bool:
    if not value:
        return False
    try:
        _email_adapter.validate_python(value)
    except PydanticValidationError:
        return False
    return True


def normalize_emails(emails: list[str]) -> list[str]:
    """Trim and lower-case a guest list, dropping blanks.

    Raises ValidationError when the list is empty or holds an invalid address.
    """
    normalized = [email.strip().lower() for email in emails if email and email.strip()]
    if not normalized:
        raise ValidationError("At least one email address is required")
    invalid = [email for email in normalized if not is_valid_email(email)]
    if invalid:
        raise ValidationError(f"Invalid email address: {', '.join(invalid)}")
    return normalized
