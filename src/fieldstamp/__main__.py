"""
Entry point for `python -m fieldstamp`.

Usage:
    python -m fieldstamp stamp document.pdf fields.json
    python -m fieldstamp text document.pdf "Jane Doe" -x 300 -y 650
    python -m fieldstamp layout
"""

from .ui.cli import main

main()
