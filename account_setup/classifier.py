"""Classify discovered incoming settings for navigation decisions."""

from dataclasses import dataclass
from typing import assert_never

from account_setup.servers import (
    AuthenticationType,
    ImapServerSettings,
    IncomingServerSettings,
    Pop3ServerSettings,
    ProviderPlaceholderSettings,
)


@dataclass(frozen=True)
class SettingsClass:
    requires_oauth: bool
    is_placeholder: bool


def classify(settings: IncomingServerSettings) -> SettingsClass:
    """OAuth is required iff the first advertised authentication type is OAuth2."""
    match settings:
        case ProviderPlaceholderSettings():
            return SettingsClass(requires_oauth=False, is_placeholder=True)
        case ImapServerSettings() | Pop3ServerSettings():
            auth_types = settings.authentication_types
            requires_oauth = bool(auth_types) and auth_types[0] == AuthenticationType.OAUTH2
            return SettingsClass(requires_oauth=requires_oauth, is_placeholder=False)
        case _:
            assert_never(settings)
