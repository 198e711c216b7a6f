"""
Application Entry Point

``create_app`` builds the FastAPI application; ``main`` serves it with
uvicorn::

    uvicorn services.api.main:app --host 0.0.0.0 --port 3001
"""

from typing import Optional

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.orm import sessionmaker

from .core.config import Settings, settings as default_settings
from .core.database import create_db_engine, create_session_factory, init_db
from .core.logging import configure_logging
from .middleware import RequestLoggingMiddleware, register_exception_handlers
from .routes import api_router


def create_app(
    config: Optional[Settings] = None,
    session_factory: Optional[sessionmaker] = None,
) -> FastAPI:
    """
    Application factory.

    Args:
        config: Settings to build the app from (defaults to environment)
        session_factory: Session factory for request sessions. When omitted
            an engine is created from ``config.DATABASE_URL``.
    """
    config = config or default_settings
    configure_logging(config)

    app = FastAPI(
        title=config.PROJECT_NAME,
        description=config.DESCRIPTION,
        version=config.VERSION,
        debug=config.DEBUG,
    )

    if session_factory is None:
        engine = create_db_engine(config)
        if config.CREATE_TABLES_ON_STARTUP:
            init_db(engine)
        session_factory = create_session_factory(engine)
    app.state.session_factory = session_factory

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.CORS_ORIGINS,
        allow_credentials=config.CORS_ALLOW_CREDENTIALS,
        allow_methods=config.CORS_ALLOW_METHODS,
        allow_headers=config.CORS_ALLOW_HEADERS,
    )
    app.add_middleware(RequestLoggingMiddleware)
    register_exception_handlers(app)

    app.include_router(api_router, prefix=config.API_V1_PREFIX)
    return app


def main() -> None:
    uvicorn.run(
        "services.api.main:create_app",
        factory=True,
        host=default_settings.API_HOST,
        port=default_settings.API_PORT,
        log_level=default_settings.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    main()
