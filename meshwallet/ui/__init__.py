"""
MESHWALLET UI - Terminal prompts and rendering.
"""

from .console import ConsoleUI, coin_amount

__all__ = ["ConsoleUI", "coin_amount"]
