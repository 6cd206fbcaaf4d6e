"""
Entry point for ``python -m bookingslots``.
"""

from .cli.app import app

if __name__ == "__main__":
    app()
