"""HTTP API for the trip engine."""
from .routes import router

__all__ = ["router"]
