"""Validation outcomes and the default input validator."""

import re
from dataclasses import dataclass
from typing import TypeAlias

# local@domain.tld, no whitespace; full RFC 5322 parsing is not attempted
_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s.]{2,}$")


@dataclass(frozen=True)
class ValidationSuccess:
    pass


@dataclass(frozen=True)
class ValidationFailure:
    message: str


ValidationOutcome: TypeAlias = ValidationSuccess | ValidationFailure


class DefaultValidator:
    """Validator used by the CLI when no other rules are injected."""

    def validate_email_address(self, email_address: str) -> ValidationOutcome:
        value = (email_address or "").strip()
        if not value:
            return ValidationFailure("Email address is required")
        if not _EMAIL_RE.match(value):
            return ValidationFailure("Email address is invalid")
        return ValidationSuccess()

    def validate_password(self, password: str) -> ValidationOutcome:
        if not password or not password.strip():
            return ValidationFailure("Password is required")
        return ValidationSuccess()

    def validate_configuration_approval(
        self, is_approved: bool | None, is_auto_discovery_trusted: bool | None
    ) -> ValidationOutcome:
        # nothing was discovered, so there is nothing to approve
        if is_auto_discovery_trusted is None or is_auto_discovery_trusted:
            return ValidationSuccess()
        if is_approved:
            return ValidationSuccess()
        return ValidationFailure("Please confirm the discovered configuration")
