"""Module entry point for running scripts.docschema as a package.

Allows: python -m scripts.docschema <command>
"""

from scripts.docschema.cli import main
import sys

if __name__ == '__main__':
    sys.exit(main())
