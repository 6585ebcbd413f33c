from __future__ import annotations

from typing import Any

from flask import request


def json_body() -> dict[str, Any]:
    """Request JSON as a dict; missing, malformed or non-object bodies read as empty."""
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}
