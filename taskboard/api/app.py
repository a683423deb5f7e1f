"""
FastAPI application for the task board.

This is the HTTP JSON API the frontend talks to. Domain errors raised by
the services are mapped to status codes here and nowhere else.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from taskboard.api import comments, projects, tickets, users
from taskboard.api.dependencies import state
from taskboard.auth.capabilities import get_hierarchy
from taskboard.auth.routes import router as auth_router
from taskboard.config import configure_logging, get_settings
from taskboard.core.errors import TaskBoardError
from taskboard.integrations.sentry import init_sentry
from taskboard.services import (
    CommentService,
    LabelService,
    ProjectService,
    TicketService,
    UserService,
)
from taskboard.storage import create_local_storage, ensure_indexes

logger = logging.getLogger(__name__)


# =============================================================================
# Lifespan
# =============================================================================


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Initialize and cleanup app resources."""
    settings = get_settings()
    configure_logging(settings)
    
    if init_sentry():
        logger.info("Sentry error tracking enabled")
    
    # Storage
    state.storage = create_local_storage()
    await ensure_indexes(state.storage)
    
    # Services
    hierarchy = get_hierarchy(settings.role_model)
    state.users = UserService(state.storage, hierarchy)
    state.projects = ProjectService(state.storage, hierarchy)
    state.tickets = TicketService(state.storage, hierarchy)
    state.comments = CommentService(state.storage, hierarchy)
    state.labels = LabelService(state.storage, hierarchy)
    
    logger.info(f"Task board API starting in {settings.environment} mode ({hierarchy!r})")
    
    yield
    
    logger.info("Task board API shutting down")


# =============================================================================
# App Setup
# =============================================================================


app = FastAPI(
    title="Task Board API",
    description="Projects, members, tickets and comments for a Trello-like board",
    version="0.1.0",
    lifespan=lifespan,
)


# CORS
settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(auth_router)
app.include_router(users.router)
app.include_router(projects.router)
app.include_router(tickets.router)
app.include_router(comments.router)


# =============================================================================
# Error Handling
# =============================================================================


def _describe_validation(exc: RequestValidationError) -> str:
    parts = []
    for error in exc.errors():
        # Drop the leading "body"/"query"/"path" segment
        field = ".".join(str(p) for p in error.get("loc", ())[1:])
        parts.append(f"{field}: {error['msg']}" if field else error["msg"])
    return "; ".join(parts) or "Invalid request"


@app.exception_handler(TaskBoardError)
async def handle_domain_error(request: Request, exc: TaskBoardError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content={"message": exc.message})


@app.exception_handler(RequestValidationError)
async def handle_request_validation(request: Request, exc: RequestValidationError):
    return JSONResponse(status_code=400, content={"message": _describe_validation(exc)})


@app.exception_handler(StarletteHTTPException)
async def handle_http_error(request: Request, exc: StarletteHTTPException):
    return JSONResponse(status_code=exc.status_code, content={"message": str(exc.detail)})


@app.exception_handler(Exception)
async def handle_unexpected(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(status_code=500, content={"message": "Internal server error"})


# =============================================================================
# Health Check
# =============================================================================


@app.get("/")
async def root():
    return {"message": "Task board API OK"}


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "service": "taskboard-api"}
