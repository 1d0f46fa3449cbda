"""Discovery service backed by a table of well-known email providers."""

from dataclasses import dataclass

from account_setup.provider_probe import email_domain
from account_setup.servers import (
    AuthenticationType,
    AutoDiscoveryResult,
    ConnectionSecurity,
    DiscoveredSettings,
    ImapServerSettings,
    NoUsableSettingsFound,
    SmtpServerSettings,
)

_OAUTH_FIRST = (AuthenticationType.OAUTH2, AuthenticationType.PASSWORD_CLEARTEXT)
_PASSWORD = (AuthenticationType.PASSWORD_CLEARTEXT,)


@dataclass(frozen=True)
class ProviderServers:
    """Server pair for a provider."""

    imap_host: str
    smtp_host: str
    authentication_types: tuple[AuthenticationType, ...] = _PASSWORD
    imap_port: int = 993
    smtp_port: int = 587
    smtp_security: ConnectionSecurity = ConnectionSecurity.STARTTLS


_GMAIL = ProviderServers(
    imap_host="imap.gmail.com",
    smtp_host="smtp.gmail.com",
    authentication_types=_OAUTH_FIRST,
    smtp_port=465,
    smtp_security=ConnectionSecurity.TLS,
)
_OUTLOOK = ProviderServers(
    imap_host="outlook.office365.com",
    smtp_host="smtp.office365.com",
    authentication_types=_OAUTH_FIRST,
)
_YAHOO = ProviderServers(
    imap_host="imap.mail.yahoo.com",
    smtp_host="smtp.mail.yahoo.com",
    authentication_types=_OAUTH_FIRST,
    smtp_port=465,
    smtp_security=ConnectionSecurity.TLS,
)
_AOL = ProviderServers(
    imap_host="imap.aol.com",
    smtp_host="smtp.aol.com",
    authentication_types=_OAUTH_FIRST,
    smtp_port=465,
    smtp_security=ConnectionSecurity.TLS,
)
_ICLOUD = ProviderServers(imap_host="imap.mail.me.com", smtp_host="smtp.mail.me.com")
_FASTMAIL = ProviderServers(
    imap_host="imap.fastmail.com",
    smtp_host="smtp.fastmail.com",
    smtp_port=465,
    smtp_security=ConnectionSecurity.TLS,
)
_GMX = ProviderServers(imap_host="imap.gmx.net", smtp_host="mail.gmx.net")

KNOWN_PROVIDERS: dict[str, ProviderServers] = {
    "gmail.com": _GMAIL,
    "googlemail.com": _GMAIL,
    "outlook.com": _OUTLOOK,
    "hotmail.com": _OUTLOOK,
    "live.com": _OUTLOOK,
    "msn.com": _OUTLOOK,
    "yahoo.com": _YAHOO,
    "aol.com": _AOL,
    "icloud.com": _ICLOUD,
    "me.com": _ICLOUD,
    "mac.com": _ICLOUD,
    "fastmail.com": _FASTMAIL,
    "gmx.net": _GMX,
    "gmx.de": _GMX,
}


class KnownProvidersDiscovery:
    """DiscoveryService that answers from KNOWN_PROVIDERS; unknown domains find nothing."""

    def __init__(self, providers: dict[str, ProviderServers] | None = None) -> None:
        self._providers = KNOWN_PROVIDERS if providers is None else providers

    async def execute(self, email_address: str) -> AutoDiscoveryResult:
        servers = self._providers.get(email_domain(email_address))
        if servers is None:
            return NoUsableSettingsFound()
        return DiscoveredSettings(
            incoming=ImapServerSettings(
                hostname=servers.imap_host,
                port=servers.imap_port,
                connection_security=ConnectionSecurity.TLS,
                authentication_types=servers.authentication_types,
                username=email_address,
            ),
            outgoing=SmtpServerSettings(
                hostname=servers.smtp_host,
                port=servers.smtp_port,
                connection_security=servers.smtp_security,
                authentication_types=servers.authentication_types,
                username=email_address,
            ),
            is_trusted=True,
        )
