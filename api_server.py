from __future__ import annotations  # FastAPI server exposing job description parsing

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.routes import router


logger = logging.getLogger(__name__)


def create_app() -> FastAPI:  # Build the API application
    application = FastAPI(title="MockMatch API")
    application.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    application.include_router(router)
    logger.info("MockMatch API initialised with %d routes", len(application.routes))
    return application


app = create_app()
