import logging
import os
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from backend_fastapi.api.routes.tasks import router as tasks_router
from frontend.web import get_registry
from frontend.web import router as board_router

# Load environment variables from .env file
load_dotenv()

logger = logging.getLogger(__name__)


def _csv_env(name: str, default: str = "*") -> list[str]:
    raw = os.getenv(name, default)
    if raw.strip() == "*":
        return ["*"]
    return [item.strip() for item in raw.split(",") if item.strip()]


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(f"ORM activo: {os.getenv('ORM', 'peewee')}")
    yield
    # Cierra los clientes HTTP de las sesiones de tablero abiertas.
    get_registry().close()


app = FastAPI(title="Task Tracker API", lifespan=lifespan)

# Configure CORS for frontend from environment variables
app.add_middleware(
    CORSMiddleware,
    allow_origins=_csv_env("CORS_ORIGINS"),
    allow_credentials=os.getenv("CORS_ALLOW_CREDENTIALS", "true").lower() == "true",
    allow_methods=_csv_env("CORS_ALLOW_METHODS"),
    allow_headers=_csv_env("CORS_ALLOW_HEADERS"),
)

app.include_router(tasks_router)
app.include_router(board_router)


@app.get("/api/health", tags=["health"])
def health_check() -> dict:
    return {"status": "ok"}
