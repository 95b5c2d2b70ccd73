from __future__ import annotations

from typing import Any

from marshmallow import pre_load


class UserEnvelopeMixin:
    """Accept both ``{"user": {...}}`` and the flat object as input."""

    @pre_load
    def unwrap_user(self, data: Any, **kwargs: Any) -> Any:
        if isinstance(data, dict) and isinstance(data.get("user"), dict):
            return data["user"]
        return data
