#!/usr/bin/env python3
"""
Coursebook - Main Entry Point

This is the thin orchestration layer that:
1. Loads configuration
2. Initializes modules
3. Runs the API server

All business logic is in the modules, following black box principles.
"""

import asyncio
import logging
import logging.config as log_config
from contextlib import asynccontextmanager
from typing import List, Optional

import redis.asyncio as redis
import uvicorn
from fastapi import Depends, FastAPI, Header, HTTPException, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from coursebook import __version__
from coursebook.config.provider import ConfigProvider, EnvConfigProvider
from coursebook.logging_config import get_logging_config
from coursebook.modules.api import (
    CourseRequest,
    CourseResponse,
    CreateUserRequest,
    UserResponse,
    validation_messages,
)
from coursebook.modules.auth import (
    ACCESS_DENIED_MESSAGE,
    AccessDeniedError,
    AuthenticatedUser,
    AuthFactory,
    BcryptVerifier,
)
from coursebook.modules.auth.service import AuthenticationService

# Import modules through their black box interfaces
from coursebook.modules.config import get_config
from coursebook.modules.storage import (
    CourseNotFoundError,
    CourseStore,
    EmptyStoreError,
    IdentifierAllocator,
    StorageFaultError,
)
from coursebook.modules.users import RedisUserDirectory, UserExistsError

# Get configuration
config = get_config()

log_config.dictConfig(get_logging_config(config.get("log_level")))
logger = logging.getLogger(__name__)

# Configuration provider (centralized config access)
config_provider: ConfigProvider = EnvConfigProvider()

# Module instances (initialized at startup)
auth_service: Optional[AuthenticationService] = None
credential_verifier: Optional[BcryptVerifier] = None
user_directory: Optional[RedisUserDirectory] = None
course_store: Optional[CourseStore] = None
redis_client: Optional[redis.Redis] = None

COURSE_NOT_FOUND_MESSAGE = "Course Not Found."


async def get_redis_client() -> redis.Redis:
    """Create Redis client from configuration."""
    redis_url = f"redis://{config.get('redis_host')}:{config.get('redis_port')}/{config.get('redis_db')}"

    return redis.from_url(
        redis_url,
        password=config.get("redis_password"),
        encoding="utf-8",
        decode_responses=True,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage application lifecycle - initialize and cleanup resources.
    """
    global auth_service, credential_verifier, user_directory, course_store, redis_client

    logger.info("Starting Coursebook API...")

    redis_client = await get_redis_client()
    user_directory = RedisUserDirectory(redis_client)

    # One verifier hashes new passwords and checks presented ones
    credential_verifier = AuthFactory.build_verifier(config_provider)
    auth_service = AuthFactory.build(
        config_provider, user_directory, redis_client, verifier=credential_verifier
    )
    logger.info("Authentication service initialized via factory")

    store_config = config_provider.get_store_config()
    course_store = CourseStore(
        store_config.path, allocator=IdentifierAllocator(store_config.id_upper_bound)
    )
    await course_store.initialize()
    logger.info(f"Course store ready at {store_config.path}")

    logger.info("Coursebook API started successfully")

    yield

    logger.info("Shutting down Coursebook API...")
    if redis_client:
        await redis_client.aclose()
    logger.info("Coursebook API shutdown complete")


app = FastAPI(
    title="Coursebook API",
    description="Course catalog with HTTP Basic protected writes",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config_provider.get_api_config().cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["Location"],
)


def _message(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"message": message})


def _require_store() -> CourseStore:
    if not course_store:
        raise HTTPException(503, "Service not initialized")
    return course_store


# Dependency injection helpers


async def authenticate_user(
    request: Request,
    authorization: Optional[str] = Header(None, description="HTTP Basic credentials"),
) -> AuthenticatedUser:
    """
    Run the authentication gate for this request.

    Every failure raises the same AccessDeniedError; the reason only
    reaches the operator log.
    """
    if not auth_service:
        raise HTTPException(503, "Service not initialized")

    result = await auth_service.authenticate(authorization)
    if not result.ok:
        raise AccessDeniedError()

    request.state.current_user = result.user
    return result.user


# User Endpoints


@app.get("/api/users", response_model=UserResponse)
async def get_current_user(current_user: AuthenticatedUser = Depends(authenticate_user)):
    """
    Return the authenticated user's profile.

    Returns:
        200: Profile (never the password hash)
        401: Access denied
    """
    return UserResponse(
        first_name=current_user.first_name,
        last_name=current_user.last_name,
        email_address=current_user.email_address,
    )


@app.post("/api/users", status_code=201)
async def create_user(payload: CreateUserRequest):
    """
    Register a user.

    Returns:
        201: Created, Location: /
        400: Validation errors
        409: Email address already registered
    """
    if not user_directory or not credential_verifier:
        raise HTTPException(503, "Service not initialized")

    password_hash = await asyncio.to_thread(credential_verifier.hash, payload.password)

    try:
        await user_directory.create_user(
            first_name=payload.first_name,
            last_name=payload.last_name,
            email_address=payload.email_address,
            password_hash=password_hash,
        )
    except UserExistsError:
        return _message(409, "Email address already in use")

    logger.info(f"User created: {payload.email_address}")
    return Response(status_code=201, headers={"Location": "/"})


# Course Endpoints


@app.get("/api/courses", response_model=List[CourseResponse])
async def list_courses():
    """Return every course."""
    return await _require_store().list_all()


@app.get("/api/courses/random", response_model=CourseResponse)
async def get_random_course():
    """
    Return one course chosen at random.

    Returns:
        200: Course
        204: No courses exist
    """
    try:
        return await _require_store().get_random()
    except EmptyStoreError:
        return Response(status_code=204)


@app.get("/api/courses/{course_id}", response_model=CourseResponse)
async def get_course(course_id: int):
    """
    Return a single course.

    Returns:
        200: Course
        404: Course not found
    """
    course = await _require_store().get_by_id(course_id)
    if course is None:
        return _message(404, COURSE_NOT_FOUND_MESSAGE)
    return course


@app.post("/api/courses", response_model=CourseResponse, status_code=201)
async def create_course(
    payload: CourseRequest,
    response: Response,
    current_user: AuthenticatedUser = Depends(authenticate_user),
):
    """
    Create a course.

    Returns:
        201: Created course, Location: /api/courses/{id}
        400: Validation errors
        401: Access denied
    """
    course = await _require_store().create(payload.model_dump())
    logger.info(f"Course {course['id']} created by {current_user.email_address}")

    response.headers["Location"] = f"/api/courses/{course['id']}"
    return course


@app.put("/api/courses/{course_id}", status_code=204)
async def update_course(
    course_id: int,
    payload: CourseRequest,
    current_user: AuthenticatedUser = Depends(authenticate_user),
):
    """
    Replace a course's title and description.

    Returns:
        204: Updated
        400: Validation errors
        401: Access denied
        404: Course not found
    """
    try:
        await _require_store().update(course_id, payload.model_dump())
    except CourseNotFoundError:
        return _message(404, COURSE_NOT_FOUND_MESSAGE)

    logger.info(f"Course {course_id} updated by {current_user.email_address}")
    return Response(status_code=204)


@app.delete("/api/courses/{course_id}", status_code=204)
async def delete_course(
    course_id: int,
    current_user: AuthenticatedUser = Depends(authenticate_user),
):
    """
    Delete a course.

    Returns:
        204: Deleted
        401: Access denied
        404: Course not found
    """
    try:
        await _require_store().delete(course_id)
    except CourseNotFoundError:
        return _message(404, COURSE_NOT_FOUND_MESSAGE)

    logger.info(f"Course {course_id} deleted by {current_user.email_address}")
    return Response(status_code=204)


# Health/Monitoring Endpoints


@app.get("/healthz")
async def healthz():
    """
    Minimal health check endpoint for readiness/liveness probes.

    Returns:
        200: Service is running
    """
    return {"status": "ok"}


@app.get("/health")
async def health_check():
    """
    Health check covering Redis and the course document.

    Returns:
        200: Service healthy
        503: Service unhealthy
    """
    redis_status = "disconnected"
    store_status = "unavailable"

    if redis_client:
        try:
            await redis_client.ping()
            redis_status = "connected"
        except redis.RedisError as e:
            logger.error(f"Health check: Redis ping failed: {e}")

    if course_store:
        try:
            await course_store.list_all()
            store_status = "readable"
        except StorageFaultError as e:
            logger.error(f"Health check: course store unreadable: {e}")

    content = {
        "redis": redis_status,
        "store": store_status,
        "modules": "initialized" if auth_service else "not initialized",
        "version": __version__,
    }

    if redis_status == "connected" and store_status == "readable" and auth_service:
        return {"status": "healthy", **content}
    return JSONResponse(status_code=503, content={"status": "unhealthy", **content})


# Error handlers


@app.exception_handler(AccessDeniedError)
async def access_denied_handler(request, exc):
    """Uniform denial, whatever the gate's internal reason."""
    realm = config_provider.get_auth_config().realm
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": ACCESS_DENIED_MESSAGE},
        headers={"WWW-Authenticate": f'Basic realm="{realm}"'},
    )


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request, exc):
    """Handle request validation errors."""
    return JSONResponse(status_code=400, content={"errors": validation_messages(exc.errors())})


@app.exception_handler(StorageFaultError)
async def storage_fault_handler(request, exc):
    """Handle course store read/write failures."""
    logger.error(f"Course store failure on {request.method} {request.url.path}: {exc}", exc_info=exc)
    return _message(500, "Internal server error")


@app.exception_handler(redis.ConnectionError)
async def redis_error_handler(request, exc):
    """Handle Redis connection errors."""
    logger.error(f"Redis connection error: {exc}")
    return _message(503, "Database connection failed")


if __name__ == "__main__":
    uvicorn.run(
        "coursebook.main:app",
        host=config.get("host"),
        port=config.get("port"),
        log_level=config.get("log_level").lower(),
        reload=config.get("debug"),
        log_config=get_logging_config(config.get("log_level")),
    )
