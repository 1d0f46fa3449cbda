"""Email account setup: server discovery and the onboarding state machine."""

from account_setup.constants import SETUP_QUIT, SETUP_SUCCESS

__all__ = ["SETUP_SUCCESS", "SETUP_QUIT"]
