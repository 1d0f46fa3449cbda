"""Entry point: python -m account_setup."""

import sys
from pathlib import Path

from account_setup.constants import SETUP_QUIT, SETUP_SUCCESS
from account_setup.wizard import run_wizard


def main() -> int:
    """Run the account setup wizard. Returns process exit code."""
    project_root = Path(__file__).resolve().parent.parent

    try:
        result = run_wizard(project_root=project_root)
    except KeyboardInterrupt:
        print("\n\nSetup cancelled.")
        return SETUP_QUIT

    if result.success:
        print("\n✅ Account settings found. Continuing setup...\n")
        return SETUP_SUCCESS

    print("\nSetup cancelled.")
    return SETUP_QUIT


if __name__ == "__main__":
    sys.exit(main())
