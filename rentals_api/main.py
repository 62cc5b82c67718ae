import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from rentals_api.deps import LOG_LEVEL
from rentals_api.routers import listings, preferences

logging.basicConfig(level=getattr(logging, LOG_LEVEL, logging.INFO),
                    format="%(asctime)s | %(levelname)s | %(message)s")
LOG = logging.getLogger("api")

app = FastAPI(
    title="Humboldt County Rentals API",
    version="1.0.0",
    description="Search rental listings synced from Humboldt County property managements."
)

app.include_router(listings.router)
app.include_router(preferences.router)


@app.exception_handler(SQLAlchemyError)
async def database_unavailable(request: Request, exc: SQLAlchemyError):
    LOG.error("Database error on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=503, content={"detail": "Listings are temporarily unavailable"})


@app.get("/api/health")
def health():
    return {"status": "ok"}
