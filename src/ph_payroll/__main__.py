"""Entry point: python -m ph_payroll."""

import sys

from ph_payroll.cli import main

if __name__ == "__main__":
    sys.exit(main())
