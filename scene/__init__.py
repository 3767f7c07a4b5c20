"""Scene perception - observe game state from the rendered page."""

from .base import BaseObserver
from .perception import TextPerception
