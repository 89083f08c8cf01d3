from .routes_status import router

__all__ = ["router"]
