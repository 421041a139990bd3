from .optimize import router as optimize_router
from .wallet import router as wallet_router
from .challenges import router as challenges_router
from .assistant import router as assistant_router
from .health import router as health_router

__all__ = [
    "optimize_router",
    "wallet_router",
    "challenges_router",
    "assistant_router",
    "health_router",
]
