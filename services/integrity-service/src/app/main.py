from app.api.router import router as api_router
from app.core.config import get_integrity_config
from app.core.metrics import metrics
from app.dependencies.container import lifespan
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from integrity_shared.utils.errors import ErrorResponse, IntegrityException
from integrity_shared.utils.logger import get_logger
from integrity_shared.utils.logging_config import setup_logging

config = get_integrity_config()
setup_logging(config.service_name, log_level=config.log_level, json_logs=config.json_logs)
logger = get_logger(__name__)

app = FastAPI(
    title="Content Integrity Service",
    description="Time-lock content seals and SimHash near-duplicate detection.",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(IntegrityException)
async def integrity_exception_handler(request: Request, exc: IntegrityException):
    metrics.log_event(
        "exception_occurred",
        {"error_code": exc.error_code, "status_code": exc.status_code},
    )
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(
            error_code=exc.error_code, message=exc.message, details=exc.details
        ).model_dump(),
    )


app.include_router(api_router)


@app.get("/")
async def root() -> dict:
    return {
        "service": config.service_name,
        "status": "operational",
        "docs": "/docs",
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=config.service_port)
