"""Middleware registration."""

from fastapi import FastAPI

from learnpath.config import Settings
from learnpath.middleware.cors import setup_cors
from learnpath.middleware.error_handler import setup_error_handlers
from learnpath.middleware.logging import setup_logging
from learnpath.middleware.request_id import RequestIdMiddleware


def setup_middleware(app: FastAPI, settings: Settings) -> None:
    """Register logging, error handlers and middleware.

    Starlette runs middleware in reverse-add order, so CORS (added last)
    wraps every response, including errors.
    """
    setup_logging(settings)
    setup_error_handlers(app)
    app.add_middleware(RequestIdMiddleware)
    setup_cors(app, settings)
