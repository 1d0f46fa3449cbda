"""Tests for account_setup.known_providers."""

import pytest

from account_setup.known_providers import KnownProvidersDiscovery, ProviderServers
from account_setup.servers import (
    AuthenticationType,
    DiscoveredSettings,
    ImapServerSettings,
    NoUsableSettingsFound,
)


@pytest.mark.asyncio
async def test_known_domain_returns_trusted_settings() -> None:
    """Known domain yields trusted IMAP and SMTP settings."""
    result = await KnownProvidersDiscovery().execute("Bob@GMail.com")
    assert isinstance(result, DiscoveredSettings)
    assert result.is_trusted is True
    assert isinstance(result.incoming, ImapServerSettings)
    assert result.incoming.hostname == "imap.gmail.com"
    assert result.incoming.authentication_types[0] == AuthenticationType.OAUTH2
    assert result.incoming.username == "Bob@GMail.com"
    assert result.outgoing.hostname == "smtp.gmail.com"


@pytest.mark.asyncio
async def test_password_provider() -> None:
    """Password-only provider lists no OAuth."""
    result = await KnownProvidersDiscovery().execute("bob@fastmail.com")
    assert result.incoming.authentication_types == (AuthenticationType.PASSWORD_CLEARTEXT,)


@pytest.mark.asyncio
async def test_unknown_domain_finds_nothing() -> None:
    """Unknown domain yields no usable settings."""
    assert await KnownProvidersDiscovery().execute("bob@example.org") == NoUsableSettingsFound()


@pytest.mark.asyncio
async def test_custom_table() -> None:
    """A custom provider table replaces the built-in one."""
    service = KnownProvidersDiscovery(
        {"example.org": ProviderServers(imap_host="imap.example.org", smtp_host="smtp.example.org")}
    )
    result = await service.execute("bob@example.org")
    assert result.incoming.hostname == "imap.example.org"
    assert await service.execute("bob@gmail.com") == NoUsableSettingsFound()
