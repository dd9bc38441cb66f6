"""DataFactory CLI entry point.

This module enables running DataFactory as:
    python -m datafactory <command>
"""

from datafactory.cli import main

if __name__ == "__main__":
    main()
