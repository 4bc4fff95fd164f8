from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from app.config import settings
from app.database import engine, Base
from app.core.exceptions import (
    EvaluationValidationError,
    NotFoundException,
    TransactionFailure,
    UnauthorizedError,
)
from app.core.logging import configure_logging
from app.routers import auth, evaluations, scores, dashboard, reports
# register tables on Base.metadata
from app.models import department, employee, user, criterion, period, evaluation, score  # noqa: F401
import logging
from sqlalchemy import exc as sa_exc

configure_logging(settings.LOG_LEVEL)
logger = logging.getLogger(__name__)

app = FastAPI(title="Employee DSS - Scoring & Ranking Engine", version="1.0")

# Include Routers
app.include_router(auth.router)
app.include_router(evaluations.router)
app.include_router(scores.router)
app.include_router(dashboard.router)
app.include_router(reports.router)


@app.exception_handler(EvaluationValidationError)
async def validation_error_handler(request: Request, exc: EvaluationValidationError):
    return JSONResponse(status_code=400, content={"error": exc.message})


@app.exception_handler(NotFoundException)
async def not_found_handler(request: Request, exc: NotFoundException):
    return JSONResponse(status_code=404, content={"error": str(exc)})


@app.exception_handler(UnauthorizedError)
async def unauthorized_handler(request: Request, exc: UnauthorizedError):
    return JSONResponse(status_code=403, content={"error": exc.message})


@app.exception_handler(TransactionFailure)
async def transaction_failure_handler(request: Request, exc: TransactionFailure):
    return JSONResponse(
        status_code=503,
        content={"error": exc.message},
        headers={"Retry-After": "1"},
    )


# Create DB tables in development; migrations own the schema elsewhere
@app.on_event("startup")
async def startup_event():
    if not settings.CREATE_TABLES_ON_STARTUP:
        return
    async with engine.begin() as conn:
        try:
            await conn.run_sync(Base.metadata.create_all)
        except sa_exc.IntegrityError as e:
            msg = str(getattr(e, "orig", e))
            if "duplicate key value violates unique constraint" in msg or "already exists" in msg:
                logger.warning("Ignored duplicate DDL error during create_all: %s", msg)
            else:
                raise


@app.get("/health")
def health():
    return {"status": "OK", "message": "Employee DSS server is running"}

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("app.main:app", host="0.0.0.0", port=8000, reload=True)
