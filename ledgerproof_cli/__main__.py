"""
Module execution entry point.

Allows running with: python -m ledgerproof_cli
"""

import sys
from ledgerproof_cli.main import main

if __name__ == "__main__":
    sys.exit(main())
