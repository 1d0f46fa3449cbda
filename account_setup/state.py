"""Wizard state owned by the account setup state machine."""

from dataclasses import dataclass, field, replace
from enum import Enum, StrEnum
from typing import Generic, TypeVar

from account_setup.servers import Found
from account_setup.validation import ValidationFailure, ValidationOutcome

T = TypeVar("T")


class ConfigStep(Enum):
    EMAIL_ADDRESS = "email_address"
    PASSWORD = "password"
    OAUTH = "oauth"
    MANUAL_SETUP = "manual_setup"


class ErrorKind(StrEnum):
    """Discovery errors shown at the address step with a retry action."""

    NETWORK = "network"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class InputField(Generic[T]):
    """A raw input value plus the message of its last failed validation."""

    value: T
    error: str | None = None

    @property
    def is_valid(self) -> bool:
        return self.error is None

    def update_value(self, value: T) -> "InputField[T]":
        """New value; any previous validation error no longer applies."""
        return InputField(value=value)

    def update_from_validation(self, outcome: ValidationOutcome) -> "InputField[T]":
        if isinstance(outcome, ValidationFailure):
            return replace(self, error=outcome.message)
        return replace(self, error=None)


@dataclass
class WizardState:
    """Mutable state of one onboarding session. Only the machine writes it."""

    step: ConfigStep = ConfigStep.EMAIL_ADDRESS
    email_address: InputField[str] = field(default_factory=lambda: InputField(""))
    password: InputField[str] = field(default_factory=lambda: InputField(""))
    configuration_approved: InputField[bool] = field(
        default_factory=lambda: InputField(False)
    )
    discovered: Found | None = None
    is_loading: bool = False
    error: ErrorKind | None = None
    is_next_button_visible: bool = True
    authorization_state: str | None = None

    @property
    def is_trusted(self) -> bool | None:
        """Trust of the discovered settings; None when nothing was discovered."""
        return self.discovered.is_trusted if self.discovered is not None else None

    def snapshot(self) -> "WizardState":
        """Copy safe to hand out; all field values are immutable."""
        return replace(self)
