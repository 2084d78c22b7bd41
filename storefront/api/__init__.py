# storefront/api/__init__.py
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from storefront.api.deps import status_for_kind
from storefront.api.routers import carts, checkout, health, orders, payment_methods
from storefront.domain.errors import StorefrontError


async def storefront_error_handler(request: Request, exc: StorefrontError) -> JSONResponse:
    """Wyjatki domeny, ktore wyszly z serwisu (np. edycja checkoutu w trakcie skladania)."""
    return JSONResponse(
        status_code=status_for_kind(exc.kind),
        content={"detail": exc.message, "error": exc.kind},
    )


def create_app() -> FastAPI:
    app = FastAPI(
        title="Storefront Cart & Checkout",
        version="1.0.0",
    )

    app.add_exception_handler(StorefrontError, storefront_error_handler)

    app.include_router(health.router)
    app.include_router(carts.router)
    app.include_router(checkout.router)
    app.include_router(orders.router)
    app.include_router(payment_methods.router)

    return app
