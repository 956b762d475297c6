#!/usr/bin/env python3
"""Entry point for running pdfworks as a module.

This allows the package to be invoked with:
    python -m pdfworks [arguments]
"""

from pdfworks.cli import main

if __name__ == "__main__":
    main()
