"""Prompt styling and messages for the account setup CLI."""

from questionary import Style

from account_setup.state import ErrorKind

STYLE = Style(
    [
        ("qmark", "fg:cyan bold"),
        ("question", "bold"),
        ("answer", "fg:green bold"),
        ("pointer", "fg:cyan bold"),
        ("highlighted", "fg:cyan bold"),
        ("selected", "fg:green"),
    ]
)

ERROR_MESSAGES: dict[ErrorKind, str] = {
    ErrorKind.NETWORK: "Could not reach the configuration servers. Check your connection.",
    ErrorKind.UNKNOWN: "Something went wrong while looking up your server settings.",
}
