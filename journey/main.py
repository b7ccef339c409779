from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from journey.core.background import drain_detached_tasks
from journey.core.config import settings
from journey.core.database import engine
from journey.core.errors import JourneyError
from journey.core.init_db import init_db
from journey.core.logger import logger
from journey.core.validation import format_error
from journey.routes import api_router

app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.PROJECT_VERSION,
    description=settings.PROJECT_DESCRIPTION,
    openapi_url=f"/openapi.json"
)

# Set all CORS enabled origins
app.add_middleware(
    CORSMiddleware,
    allow_origin_regex=r"^https?:\/\/(localhost|127\.0\.0\.1)(:\d{1,5})?$",
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Every domain failure is a 400 carrying only a message
@app.exception_handler(JourneyError)
async def journey_error_handler(request: Request, exc: JourneyError):
    logger.info(f"{request.method} {request.url.path} rejected [{exc.code.value}]: {exc.message}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"message": exc.message},
    )


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(request: Request, exc: RequestValidationError):
    violations = [format_error(err) for err in exc.errors()]
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"message": "invalid input: " + "; ".join(violations)},
    )


# Include all API routes
app.include_router(api_router)

@app.get("/")
async def root():
    return {"message": "Welcome to Journey API"}

@app.get("/health")
async def health_check():
    return {"status": "healthy"}

@app.on_event("startup")
async def startup_event():
    if settings.CREATE_TABLES_ON_STARTUP:
        await init_db()
    logger.info(f"{settings.PROJECT_NAME} {settings.PROJECT_VERSION} started")

@app.on_event("shutdown")
async def shutdown_event():
    await drain_detached_tasks(timeout=settings.NOTIFICATION_DRAIN_SECONDS)
    await engine.dispose()
