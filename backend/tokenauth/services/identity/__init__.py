from __future__ import annotations

from .dto import UserPublicOut, UserRegisterIn
from .service import IdentityService

__all__ = ["IdentityService", "UserPublicOut", "UserRegisterIn"]
