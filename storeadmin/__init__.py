"""Storefront admin backend: content pages and product listings over JSON files."""
from __future__ import annotations

from .app_factory import create_app

__version__ = "1.0.0"

__all__ = ["create_app", "__version__"]
