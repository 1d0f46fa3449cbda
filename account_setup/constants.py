"""Exit codes for the account setup CLI."""

SETUP_SUCCESS = 0  # Discovery step finished, account state stored
SETUP_QUIT = 1  # User backed out or cancelled (Ctrl+C)
