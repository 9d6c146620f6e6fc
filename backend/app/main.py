from dotenv import load_dotenv
import pathlib

# Load .env from backend folder (parent of app)
env_path = pathlib.Path(__file__).parent.parent / '.env'
load_dotenv(env_path)
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import logging
import os
import sys

from similo import DynamicWeightMatcher, SimiloConfig
from similo_api import router as similo_router

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("SimiloServer")


def create_app(config: SimiloConfig = None) -> FastAPI:
    """Build the API app around one matcher instance"""
    app = FastAPI(title="Similo Self-Healing Locator Service")

    # CORS Configuration
    # In production, set CORS_ORIGINS environment variable to comma-separated allowed origins
    cors_origins_env = os.getenv("CORS_ORIGINS", "")
    if cors_origins_env:
        allowed_origins = [origin.strip() for origin in cors_origins_env.split(",")]
    else:
        # Development defaults - localhost only
        allowed_origins = [
            "http://localhost:5173",
            "http://localhost:3000",
            "http://127.0.0.1:5173",
            "http://127.0.0.1:3000",
        ]

    app.add_middleware(
        CORSMiddleware,
        allow_origins=allowed_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Authorization", "Content-Type", "Accept"],
    )

    matcher = DynamicWeightMatcher(config or SimiloConfig.from_env())
    if matcher.persistence is not None and matcher.persistence.path.exists():
        matcher.load_weights()
    else:
        logger.info("[SIMILO] No saved weights found, starting from base weights")
    app.state.matcher = matcher

    app.include_router(similo_router)

    # ============ Health Check ============
    @app.get("/api/health")
    async def health_check():
        """Health check endpoint"""
        return {
            "status": "healthy",
            "platform": sys.platform,
            "matcher": app.state.matcher.get_stats()
        }

    return app


app = create_app()
