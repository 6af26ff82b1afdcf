"""Password validation service.

Validates password strength according to configurable rules:
- Minimum length
- Uppercase letter requirement
- Lowercase letter requirement
- Digit requirement
- Special character requirement
"""

import re

from tenantaccess.core.config import Settings
from tenantaccess.domain.exceptions import ErrorDetail


class PasswordValidator:
    """Validates password strength against a configurable policy."""

    SPECIAL_CHARS = r"!@#$%^&*()_+\-=\[\]{};':\"\\|,.<>\/?`~"

    def __init__(
        self,
        min_length: int = 8,
        require_uppercase: bool = True,
        require_lowercase: bool = True,
        require_digit: bool = True,
        require_special: bool = False,
        enabled: bool = True,
        field: str = "password",
    ) -> None:
        """Initialize the password validator.

        Args:
            min_length: Minimum password length.
            require_uppercase: Require at least one uppercase letter.
            require_lowercase: Require at least one lowercase letter.
            require_digit: Require at least one digit.
            require_special: Require at least one special character.
            enabled: When False only the non-empty check applies.
            field: Field name reported in validation errors.
        """
        self.min_length = min_length
        self.require_uppercase = require_uppercase
        self.require_lowercase = require_lowercase
        self.require_digit = require_digit
        self.require_special = require_special
        self.enabled = enabled
        self.field = field

    @classmethod
    def from_settings(cls, settings: Settings) -> "PasswordValidator":
        """Build a validator from the configured credential policy."""
        return cls(
            min_length=settings.password_min_length,
            require_uppercase=settings.password_require_uppercase,
            require_lowercase=settings.password_require_lowercase,
            require_digit=settings.password_require_digit,
            require_special=settings.password_require_special,
            enabled=settings.password_policy_enabled,
        )

    def _error(self, message: str, code: str) -> ErrorDetail:
        return ErrorDetail(field=self.field, message=message, code=code)

    def validate(self, password: str) -> list[ErrorDetail]:
        """Validate a password against the policy.

        Args:
            password: The password to validate.

        Returns:
            List of validation errors. Empty list if password is valid.
        """
        if not password:
            return [self._error("Password is required", "password_required")]
        if not self.enabled:
            return []

        errors: list[ErrorDetail] = []

        if len(password) < self.min_length:
            errors.append(
                self._error(
                    f"Password must be at least {self.min_length} characters",
                    "password_too_short",
                )
            )
        if self.require_uppercase and not re.search(r"[A-Z]", password):
            errors.append(
                self._error(
                    "Password must contain at least one uppercase letter",
                    "password_no_uppercase",
                )
            )
        if self.require_lowercase and not re.search(r"[a-z]", password):
            errors.append(
                self._error(
                    "Password must contain at least one lowercase letter",
                    "password_no_lowercase",
                )
            )
        if self.require_digit and not re.search(r"\d", password):
            errors.append(
                self._error("Password must contain at least one digit", "password_no_digit")
            )
        if self.require_special and not re.search(f"[{self.SPECIAL_CHARS}]", password):
            errors.append(
                self._error(
                    "Password must contain at least one special character",
                    "password_no_special",
                )
            )

        return errors

    def is_valid(self, password: str) -> bool:
        """Check if a password is valid."""
        return not self.validate(password)
