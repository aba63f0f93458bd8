import logging
import os
import sys

from dotenv import load_dotenv

# Load environment variables from .env before settings are read
load_dotenv()

from fastapi import FastAPI

from .core.config import settings
from .exception_handlers import register_exception_handlers
from .lifespan import lifespan
from .middleware.logging import LoggingMiddleware
from .middleware.request_id import RequestIDMiddleware
from .middleware.request_size import RequestSizeLimitMiddleware
from .routers import devices, locations

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL, logging.INFO),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)

logger = logging.getLogger("tracker")

app = FastAPI(title="Device Location Tracker", version="1.0.0", lifespan=lifespan)

# Last added runs first: request id is assigned before the access log line is written
app.add_middleware(RequestSizeLimitMiddleware, max_size=settings.MAX_REQUEST_BYTES)
app.add_middleware(LoggingMiddleware)
app.add_middleware(RequestIDMiddleware)

register_exception_handlers(app)

app.include_router(devices.router)
app.include_router(locations.router)


@app.get("/healthz", include_in_schema=False)
async def healthz():
    return {"status": "ok"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("tracker.main:app", host="0.0.0.0", port=int(os.getenv("PORT", "8000")))
