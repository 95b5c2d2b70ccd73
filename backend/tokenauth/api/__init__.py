"""HTTP API: mounts the versioned blueprints under ``API_BASE_PREFIX``."""

from __future__ import annotations

from flask import Flask


def _mount_prefix(*segments: str) -> str:
    """Join URL segments into one absolute prefix, skipping empty ones."""
    return "/" + "/".join(s.strip("/") for s in segments if s.strip("/"))


def init_app(app: Flask) -> None:
    """Mount each v1 blueprint at ``{API_BASE_PREFIX}/v1{relative prefix}``."""

    from tokenauth.api.v1 import API_VERSION, REGISTRY

    base = app.config.get("API_BASE_PREFIX", "/api")
    for blueprint, relative in REGISTRY:
        app.register_blueprint(blueprint, url_prefix=_mount_prefix(base, API_VERSION, relative))


__all__ = ["init_app"]
