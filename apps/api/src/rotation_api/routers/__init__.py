# API routers package
from . import rotation

__all__ = ["rotation"]
