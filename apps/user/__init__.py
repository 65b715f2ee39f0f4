"""User module: creation and lookup of anonymous users."""

from .api import router
from .models import User
from .service import UserService

__all__ = ["router", "User", "UserService"]
