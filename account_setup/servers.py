"""Server settings and discovery result types.

Incoming settings form a closed union. Code that branches on the variant
uses ``match`` with ``assert_never`` so a new protocol variant fails type
checking until every branch handles it.
"""

from dataclasses import dataclass, field
from enum import StrEnum
from typing import TypeAlias, assert_never


class AuthenticationType(StrEnum):
    """Authentication mechanisms a discovered server advertises, best first."""

    PASSWORD_CLEARTEXT = "PasswordCleartext"
    PASSWORD_ENCRYPTED = "PasswordEncrypted"
    OAUTH2 = "OAuth2"


class ConnectionSecurity(StrEnum):
    NONE = "none"
    STARTTLS = "starttls"
    TLS = "tls"


class IncomingProtocolType(StrEnum):
    IMAP = "imap"
    POP3 = "pop3"


@dataclass(frozen=True)
class ImapServerSettings:
    hostname: str
    port: int = 993
    connection_security: ConnectionSecurity = ConnectionSecurity.TLS
    authentication_types: tuple[AuthenticationType, ...] = (
        AuthenticationType.PASSWORD_CLEARTEXT,
    )
    username: str = ""


@dataclass(frozen=True)
class Pop3ServerSettings:
    hostname: str
    port: int = 995
    connection_security: ConnectionSecurity = ConnectionSecurity.TLS
    authentication_types: tuple[AuthenticationType, ...] = (
        AuthenticationType.PASSWORD_CLEARTEXT,
    )
    username: str = ""


@dataclass(frozen=True)
class ProviderPlaceholderSettings:
    """Marker for "domain belongs to the known provider" without concrete parameters.

    Produced by the MX shortcut. Carries the matched MX host for display only;
    it is never inspected for authentication types.
    """

    mx_hostname: str = ""


@dataclass(frozen=True)
class SmtpServerSettings:
    hostname: str
    port: int = 587
    connection_security: ConnectionSecurity = ConnectionSecurity.STARTTLS
    authentication_types: tuple[AuthenticationType, ...] = (
        AuthenticationType.PASSWORD_CLEARTEXT,
    )
    username: str = ""


IncomingServerSettings: TypeAlias = (
    ImapServerSettings | Pop3ServerSettings | ProviderPlaceholderSettings
)


def protocol_type_of(settings: IncomingServerSettings | None) -> IncomingProtocolType | None:
    """Protocol identifier of a typed settings variant; None for placeholder or missing."""
    match settings:
        case None:
            return None
        case ImapServerSettings():
            return IncomingProtocolType.IMAP
        case Pop3ServerSettings():
            return IncomingProtocolType.POP3
        case ProviderPlaceholderSettings():
            return None
        case _:
            assert_never(settings)


# --- Results of the external autodiscovery service ---


@dataclass(frozen=True)
class NoUsableSettingsFound:
    pass


@dataclass(frozen=True)
class DiscoveredSettings:
    incoming: IncomingServerSettings
    outgoing: SmtpServerSettings | None = None
    is_trusted: bool = False


@dataclass(frozen=True)
class DiscoveryNetworkError:
    cause: BaseException | None = None


@dataclass(frozen=True)
class UnexpectedException:
    cause: BaseException | None = None


AutoDiscoveryResult: TypeAlias = (
    NoUsableSettingsFound | DiscoveredSettings | DiscoveryNetworkError | UnexpectedException
)


# --- Unified outcome of one discovery attempt ---


@dataclass(frozen=True)
class Found:
    incoming: IncomingServerSettings
    outgoing: SmtpServerSettings | None = None
    is_trusted: bool = False


@dataclass(frozen=True)
class NotFound:
    pass


@dataclass(frozen=True)
class NetworkFailure:
    detail: str = field(default="", compare=False)


@dataclass(frozen=True)
class UnknownFailure:
    detail: str = field(default="", compare=False)


DiscoveryOutcome: TypeAlias = Found | NotFound | NetworkFailure | UnknownFailure
