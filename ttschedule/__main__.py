"""
Package entry point.

Allows running the application via:

    python -m ttschedule

This simply forwards execution to ttschedule.cli.main().
"""

from ttschedule.cli import main

if __name__ == "__main__":
    main()
