# boxoffice/main.py
import logging
from contextlib import asynccontextmanager

from decouple import config
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from boxoffice.database import database, ensure_indexes
from boxoffice.errors import DomainError, HTTP_STATUS
from boxoffice.routes import admin, analytics, bookings, events, halls, payment

logging.basicConfig(
    level=config("LOG_LEVEL", default="INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    await ensure_indexes(database)
    yield


app = FastAPI(title="Box Office", lifespan=lifespan)


@app.exception_handler(DomainError)
async def domain_error_handler(request: Request, exc: DomainError):
    status_code = HTTP_STATUS.get(exc.code, 400)
    logger.info("%s %s -> %s %s", request.method, request.url.path, status_code, exc)
    return JSONResponse(status_code=status_code, content={"detail": exc.message, "code": exc.code.value})


# Include routers with appropriate prefixes
app.include_router(halls.router, prefix="/api/halls", tags=["Halls"])
app.include_router(events.router, prefix="/api/events", tags=["Events"])
app.include_router(bookings.router, prefix="/api/bookings", tags=["Bookings"])
app.include_router(admin.router, prefix="/api/admin", tags=["Admin"])
app.include_router(payment.router, prefix="/api/payment", tags=["Payment"])
app.include_router(analytics.router, prefix="/api", tags=["Analytics"])

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
