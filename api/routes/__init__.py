"""
API Routes for the Lead Qualification API.
"""

from . import conversations, classifications

__all__ = ["conversations", "classifications"]
