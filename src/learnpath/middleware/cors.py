"""Cross-origin access for the LearnPath student and coach web clients."""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from learnpath.config import Settings

# No DELETE: tasks and users are never removed through the API
ALLOWED_METHODS = ["GET", "POST", "PUT", "PATCH", "OPTIONS"]


def setup_cors(app: FastAPI, settings: Settings) -> None:
    """Allow the configured dashboard origins (LP_CORS_ORIGINS)."""
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=ALLOWED_METHODS,
        allow_headers=["*"],
        expose_headers=["X-Request-Id"],
    )
