from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from querypage.core.config import settings
from querypage.core.logging_setup import configure_logging
from querypage.core.request_context import current_request_id, install_request_context
from querypage.api.router import router as api_router
from querypage.services.errors import PagingError


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging(settings.LOG_LEVEL)
    yield


app = FastAPI(title=settings.APP_NAME, version="0.1.0", lifespan=lifespan)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
install_request_context(app)

app.include_router(api_router, prefix="/api")

@app.exception_handler(PagingError)
async def paging_error_handler(request: Request, exc: PagingError):
    return JSONResponse(
        status_code=400,
        content={"detail": str(exc), "field": exc.field_name, "request_id": current_request_id()},
    )

@app.get("/", include_in_schema=False)
def landing():
    return JSONResponse({"service": settings.APP_NAME, "status": "ok"})

@app.get("/health")
def health():
    return {"status": "ok"}
