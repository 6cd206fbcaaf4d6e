"""
Slot availability engine for salon appointment booking.
"""

__version__ = "0.1.0"
