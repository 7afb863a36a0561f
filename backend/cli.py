#!/usr/bin/env python3
"""
Model Studio CLI - main entry point
"""

import os
import sys

# Make backend modules importable when run as a script
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))


def main():
    """CLI entry point"""
    from cli_app import ModelStudioCLI

    app = ModelStudioCLI()
    sys.exit(app.run())


if __name__ == "__main__":
    main()
