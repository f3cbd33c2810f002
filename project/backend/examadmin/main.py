import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from . import __version__
from .config import settings
from .errors import register_exception_handlers
from .routes import admin, auth
from .utils.database import close_db_connection, connect_to_db

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Exam Admin API",
    description="Admin API for creating and managing daily timed tests",
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json"
)

# CORS Configuration
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
)

register_exception_handlers(app)

# Include routers
app.include_router(auth.router)
app.include_router(admin.router)


@app.on_event("startup")
async def startup_event():
    settings.check_startup()
    await connect_to_db()


@app.on_event("shutdown")
async def shutdown_event():
    await close_db_connection()


@app.get("/")
async def root():
    return {
        "success": True,
        "message": "Admin Backend Running",
        "env": {
            "hasMongoUri": bool(settings.MONGODB_URI),
            "hasJwtSecret": settings.has_custom_secret,
            "environment": settings.ENVIRONMENT,
        },
    }


@app.get("/health", include_in_schema=False)
async def health_check():
    return {"success": True, "status": "healthy"}


def run():
    import uvicorn

    uvicorn.run("examadmin.main:app", host=settings.HOST, port=settings.PORT)


if __name__ == "__main__":
    run()
