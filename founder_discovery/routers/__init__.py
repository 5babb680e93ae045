from .discover import router as discover_router

ROUTERS = (discover_router,)

__all__ = [
    "ROUTERS",
    "discover_router",
]
