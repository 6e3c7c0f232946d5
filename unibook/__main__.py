"""
Package entry point.

Allows running the application via:

    python -m unibook

This simply forwards execution to unibook.cli.main().
"""

from unibook.cli import main

if __name__ == "__main__":
    main()
