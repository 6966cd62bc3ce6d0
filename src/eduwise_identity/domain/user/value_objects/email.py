"""Email value object.

Provides validated, normalized email addresses for user identification.
Syntax is checked with email-validator, the same checker pydantic's
``EmailStr`` uses at the API boundary, so both accept the same addresses.
"""

from dataclasses import dataclass

from email_validator import EmailNotValidError, validate_email

from eduwise_identity.exceptions import InvalidEmailError


@dataclass(frozen=True)
class Email:
    """Value object representing a validated email address.

    Normalized to lower case so that comparisons are case-insensitive.
    """

    value: str

    def __post_init__(self) -> None:
        if not self.value or not self.value.strip():
            msg = "Email cannot be empty"
            raise InvalidEmailError(msg)

        try:
            checked = validate_email(self.value.strip(), check_deliverability=False)
        except EmailNotValidError as e:
            raise InvalidEmailError from e

        # Replace value with normalized version (frozen dataclass workaround)
        object.__setattr__(self, "value", checked.normalized.lower())

    def __str__(self) -> str:
        return self.value

    def __repr__(self) -> str:
        return f"Email('{self.value}')"
