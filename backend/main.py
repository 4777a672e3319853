import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from backend.core.config import settings
from backend.api.endpoints import router as api_router
from backend.db.database import dispose_db, init_db

logging.basicConfig(level=settings.LOG_LEVEL.upper())

app = FastAPI(
    title="CornBreeder Simulation API",
    description="Multi-generational selective breeding of maize for yield, resistance and height.",
    version="0.1.0"
)

# Set up CORS
if settings.CORS_ORIGINS:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[str(origin) for origin in settings.CORS_ORIGINS],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

@app.on_event("startup")
async def on_startup():
    """
    This function runs when the application starts.
    It initializes the archive database.
    """
    await init_db()

@app.on_event("shutdown")
async def on_shutdown():
    await dispose_db()

# Include the API router
app.include_router(api_router, prefix="/api")

@app.get("/")
async def root():
    return {"message": "Welcome to the CornBreeder API"}
