"""FastAPI application entry point."""
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from finroute.config import settings
from finroute.database import database
from finroute.log import configure_logging
from finroute.routers import achievements, auth, dashboard, plans, profile, reminders


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan - startup and shutdown events."""
    # Startup
    configure_logging()
    await database.connect()
    await database.ensure_indexes()
    yield
    # Shutdown
    await database.disconnect()


app = FastAPI(
    title="FinRoute API",
    description="Personal finance planning backend",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(auth.router)
app.include_router(profile.router)
app.include_router(plans.router)
app.include_router(reminders.router)
app.include_router(achievements.router)
app.include_router(dashboard.router)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    """Report request validation errors without echoing the rejected input."""
    # Rejected input may be NaN or Infinity, which JSON cannot carry
    errors = [
        {key: value for key, value in error.items() if key != "input"}
        for error in exc.errors()
    ]
    return JSONResponse(status_code=422, content={"detail": jsonable_encoder(errors)})


@app.get("/")
async def root():
    """Root endpoint - health check."""
    return {"status": "ok", "message": "FinRoute API"}


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy"}
