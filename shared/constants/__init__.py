from .environments import Environment
from .locations import Locations

__all__ = ["Environment", "Locations"]
