import time

from fastapi import FastAPI, HTTPException, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.responses import JSONResponse
from starlette.status import HTTP_500_INTERNAL_SERVER_ERROR, HTTP_503_SERVICE_UNAVAILABLE
import uvicorn

from learnpath.config import create_db, get_settings
from learnpath.routes.catalog_routes import catalog_routes
from learnpath.routes.dashboard_routes import dashboard_routes
from learnpath.routes.session_routes import session_routes
from learnpath.utils.errors import RecordStoreError
from learnpath.utils.logger import clear_request_id, configure_logging, set_request_id

settings = get_settings()
logger = configure_logging(
    log_dir=settings.LOG_DIR,
    log_file=settings.LOG_FILE,
    level=settings.LOG_LEVEL,
    console=settings.LOG_CONSOLE,
)
create_db()

app = FastAPI(title="learnpath")
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def request_context(request: Request, call_next):
    """Tag every log line of a request with its id and log the timing."""
    rid = set_request_id(request.headers.get("x-request-id"))
    start = time.perf_counter()
    try:
        response = await call_next(request)
    except Exception:
        logger.exception("%s %s crashed", request.method, request.url.path)
        raise
    finally:
        clear_request_id()
    logger.info(
        "%s %s -> %s duration_ms=%d",
        request.method, request.url.path, response.status_code, (time.perf_counter() - start) * 1000,
    )
    response.headers["x-request-id"] = rid
    return response


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    log = logger.error if exc.status_code >= 500 else logger.warning
    log("%s %s -> %s detail=%s", request.method, request.url.path, exc.status_code, exc.detail)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail}, headers=exc.headers)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.warning("%s %s rejected errors=%s", request.method, request.url.path, exc.errors())
    return JSONResponse(status_code=422, content={"detail": jsonable_encoder(exc.errors())})


@app.exception_handler(RecordStoreError)
async def record_store_exception_handler(request: Request, exc: RecordStoreError) -> JSONResponse:
    logger.error("%s %s store unavailable op=%s", request.method, request.url.path, exc.operation)
    return JSONResponse(status_code=HTTP_503_SERVICE_UNAVAILABLE, content={"detail": "Data is temporarily unavailable"})


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    # Details stay in the log.
    logger.exception("%s %s unhandled error", request.method, request.url.path)
    return JSONResponse(status_code=HTTP_500_INTERNAL_SERVER_ERROR, content={"detail": "Internal Server Error"})


@app.get("/")
def health():
    return {"message": "learnpath is healthy"}


app.include_router(catalog_routes, prefix="/learn", tags=["catalog"])
app.include_router(dashboard_routes, prefix="/learn", tags=["dashboard"])
app.include_router(session_routes, prefix="/learn", tags=["sessions"])

if __name__ == "__main__":
    uvicorn.run("learnpath.api:app", host="0.0.0.0", port=8000)
