"""HTTP error mapping for the storefront API."""

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from protean.integrations.fastapi import register_exception_handlers

from storefront.checkout.composer import StockConflict
from storefront.order.destination import ConfirmationRequired

logger = structlog.get_logger(__name__)


def register_storefront_exception_handlers(app: FastAPI) -> None:
    """Protean's defaults plus 409s for stock conflicts and pending confirmations."""
    register_exception_handlers(app)

    @app.exception_handler(StockConflict)
    async def stock_conflict_handler(_request: Request, exc: StockConflict):
        logger.info("Stock conflict", messages=exc.messages)
        return JSONResponse(status_code=409, content={"error": exc.messages})

    @app.exception_handler(ConfirmationRequired)
    async def confirmation_required_handler(_request: Request, exc: ConfirmationRequired):
        return JSONResponse(
            status_code=409,
            content={"error": exc.messages, "confirmation": exc.form.to_dict()},
        )

    @app.exception_handler(Exception)
    async def unexpected_error_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error", path=request.url.path, error=str(exc))
        return JSONResponse(status_code=500, content={"error": "Something went wrong, please try again"})
