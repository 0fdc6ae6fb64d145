from fastapi import FastAPI, Request
import time
import logging

from routes import rearrange, sheets

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Mark Sheet Rearranger API")


@app.middleware("http")
async def log_requests(request: Request, call_next):
    t0 = time.perf_counter()
    logger.info("REQUEST  %s %s", request.method, request.url.path)
    response = await call_next(request)
    elapsed_ms = (time.perf_counter() - t0) * 1000
    logger.info("RESPONSE %s %s — status: %d, time: %.1fms", request.method, request.url.path, response.status_code, elapsed_ms)
    return response

app.include_router(sheets.router, prefix="/api")
app.include_router(rearrange.router, prefix="/api")


@app.get("/")
def root():
    return {"status": "ok", "message": "Mark Sheet Rearranger API"}
