"""API route registrations."""

from interfaces.api.routes.customer_routes import router as customer_router
from interfaces.api.routes.metrics_routes import router as metrics_router

__all__ = ["customer_router", "metrics_router"]
