# textile_orders/main.py
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
import uvicorn

from textile_orders.api import api_router
from textile_orders.data import database
from textile_orders.domain.errors import (
    CatalogUnavailable,
    ConcurrencyConflict,
    OrderValidationError,
    SubmissionError,
    SubmissionInProgress,
)
from textile_orders.utils.logging import get_logger

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(_: FastAPI):
    logger.info("Initializing database")
    try:
        database.init_db()
    except Exception as e:
        logger.error(f"Failed to create tables: {e}")
        raise
    logger.info("Database tables ready")
    yield


async def order_validation_handler(_: Request, exc: OrderValidationError):
    return JSONResponse(
        status_code=422,
        content={
            "detail": str(exc),
            "error": "order_validation",
            "issues": [issue.to_dict() for issue in exc.issues],
        },
    )


async def submission_failed_handler(_: Request, exc: SubmissionError):
    return JSONResponse(
        status_code=400,
        content={"detail": exc.reason, "error": "Failed to create sales order"},
    )


async def conflict_handler(_: Request, exc: RuntimeError):
    return JSONResponse(status_code=409, content={"detail": str(exc), "error": "conflict"})


async def unavailable_handler(_: Request, exc: CatalogUnavailable):
    return JSONResponse(status_code=503, content={"detail": str(exc), "error": "catalog_unavailable"})


async def bad_request_handler(_: Request, exc: ValueError):
    return JSONResponse(status_code=400, content={"detail": str(exc)})


def create_app() -> FastAPI:
    app = FastAPI(
        title="Textile Sales Order Service",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.add_exception_handler(OrderValidationError, order_validation_handler)
    app.add_exception_handler(SubmissionError, submission_failed_handler)
    app.add_exception_handler(SubmissionInProgress, conflict_handler)
    app.add_exception_handler(ConcurrencyConflict, conflict_handler)
    app.add_exception_handler(CatalogUnavailable, unavailable_handler)
    app.add_exception_handler(ValueError, bad_request_handler)

    app.include_router(api_router)

    return app


app = create_app()

if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=8000)
