"""Action module: submission, classification and history of actions."""

from .api import router
from .models import Action
from .service import ActionService

__all__ = ["router", "Action", "ActionService"]
