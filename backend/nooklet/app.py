"""
Nooklet - FastAPI Backend
"""

from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from nooklet.config import settings
from nooklet.database.db import init_db
from nooklet.logging import setup_logging, get_logger
from nooklet.routers import auth, home, nooklets, rag
from nooklet.services.auth import AuthService
from nooklet.services.backboard import BackboardService
from nooklet.services.nooklets import NookletService
from nooklet.services.profiles import ProfileService
from nooklet.services.rag import RagService

logger = get_logger('main')


def create_app(
    db_path: str | None = None,
    backboard: BackboardService | None = None,
) -> FastAPI:
    database_path = db_path or settings.DATABASE_PATH

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        setup_logging()
        logger.info("Starting Nooklet API")

        await init_db(database_path)
        logger.info("Database initialized")

        # Initialize services
        if backboard is None:
            app.state.backboard = BackboardService()
            await app.state.backboard.initialize()
        else:
            app.state.backboard = backboard

        app.state.profile_service = ProfileService(db_path=database_path)
        app.state.auth_service = AuthService(
            db_path=database_path,
            profiles=app.state.profile_service,
        )
        app.state.nooklet_service = NookletService(db_path=database_path)
        app.state.rag_service = RagService(
            db_path=database_path,
            backboard=app.state.backboard,
        )
        logger.info("Services initialized")

        yield

        logger.info("Shutting down application")

    app = FastAPI(
        title="Nooklet API",
        description="Journaling with auto-saving markdown nooklets",
        version="1.0.0",
        lifespan=lifespan
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(auth.router, tags=["Auth"])
    app.include_router(home.router, tags=["Journal"])
    app.include_router(nooklets.router, prefix="/api/v1", tags=["Nooklets"])
    app.include_router(rag.router, prefix="/test/llm", tags=["RAG Test"])

    @app.get("/health")
    async def health_check():
        return {
            "status": "healthy",
            "service": "nooklet",
            "backboard_available": app.state.backboard.is_available if hasattr(app.state, 'backboard') else False,
        }

    @app.get("/")
    async def root():
        return {
            "name": "Nooklet API",
            "version": "1.0.0",
            "docs": "/docs",
            "health": "/health"
        }

    return app
