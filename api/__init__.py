"""
API Module for the lead qualification service.

FastAPI application with routes for:
- Conversations (lead intake and user turns)
- Classification reporting
- Industry listing
"""

from .main import create_app, app

__all__ = ["create_app", "app"]
