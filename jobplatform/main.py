# ========================================
# jobplatform/main.py - APPLICATION ENTRY POINT
# ========================================

import logging

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from jobplatform import config
from jobplatform.database import connect_to_mongo, close_mongo_connection, get_db
from jobplatform.utils.storage import get_upload_dir

# ===========================
# IMPORT ALL ROUTERS
# ===========================

from jobplatform.routes.user import router as user_router
from jobplatform.routes.profile import router as profile_router
from jobplatform.routes.job import router as job_router
from jobplatform.routes.employer import router as employer_router
from jobplatform.routes.application import router as application_router
from jobplatform.routes.jobseeker import router as jobseeker_router
from jobplatform.routes.company import router as company_router
from jobplatform.routes.upload import router as upload_router

logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

# ===========================
# CREATE FASTAPI APP
# ===========================

app = FastAPI(
    title="Job Platform API",
    description="Job recruitment backend for jobseekers and employers",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc"
)

# ===========================
# CORS MIDDLEWARE
# ===========================

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["Authorization"],
)

# ===========================
# ERROR HANDLERS
# ===========================

@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": exc.detail},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = [
        {"field": ".".join(str(part) for part in err.get("loc", ())), "error": err.get("msg")}
        for err in exc.errors()
    ]
    return JSONResponse(status_code=400, content={"message": "Invalid request", "errors": errors})


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"message": "Server Error Occurred"})

# ===========================
# DATABASE EVENTS
# ===========================

@app.on_event("startup")
async def start_db():
    """Connect to MongoDB on startup; the process exits if this fails."""
    get_upload_dir()
    await connect_to_mongo()

@app.on_event("shutdown")
async def stop_db():
    await close_mongo_connection()

# ===========================
# REGISTER ROUTERS
# ===========================

app.include_router(user_router)
app.include_router(profile_router)
app.include_router(job_router)
app.include_router(employer_router)
app.include_router(application_router)
app.include_router(jobseeker_router)
app.include_router(company_router)
app.include_router(upload_router)

# Uploaded files are referenced as /uploads/<name>
app.mount("/uploads", StaticFiles(directory=str(config.UPLOAD_DIR), check_dir=False), name="uploads")

# ===========================
# ROOT ENDPOINTS
# ===========================

@app.get("/")
async def root():
    return {
        "status": "Job Platform API Running",
        "version": "1.0.0",
        "documentation": "/docs",
    }


@app.get("/health")
async def health_check(db=Depends(get_db)):
    try:
        await db.command("ping")
    except Exception:
        logger.warning("Health check could not reach MongoDB", exc_info=True)
        return JSONResponse(status_code=503, content={"status": "unhealthy", "database": "unreachable"})

    return {"status": "healthy", "database": "connected"}
