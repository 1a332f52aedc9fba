# api.py
import logging
import os
from typing import Any, List, Optional

from dotenv import load_dotenv
from fastapi import APIRouter, FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

_loaded = load_dotenv()
logging.basicConfig(level=os.getenv("LOG_LEVEL", "INFO").upper(),
                    format="%(asctime)s %(levelname)s %(name)s: %(message)s")
_log = logging.getLogger("scamradar.api")
_log.info("[API] .env loaded: %s", _loaded)

from scamradar.core.dispatch import KINDS, ScanEngine
from scamradar.settings import Settings
from scamradar.sources.registry import Sources
from scamradar.utils.ratelimit import RateLimiter

MAX_BATCH = 20

ERR_INPUT = "Please provide a valid input to scan"
ERR_RATE = "Too many requests. Please wait a moment and try again."
ERR_SCAN = "An error occurred while scanning. Please try again."


class ScanRequest(BaseModel):
    input: Any = None
    kind: Optional[str] = None


class BatchRequest(BaseModel):
    inputs: List[Any] = []
    kind: Optional[str] = None


def client_ip(request: Request) -> str:
    fwd = request.headers.get("x-forwarded-for", "")
    first = fwd.split(",")[0].strip()
    if first:
        return first
    real = (request.headers.get("x-real-ip") or "").strip()
    if real:
        return real
    return request.client.host if request.client else "unknown"


def create_app(engine: Optional[ScanEngine] = None, settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or Settings.from_env()
    _log.info("[API] ENV presence -> GOPLUS_BASE_URL: %s, ENS_PRIMARY_RPC: %s, ASIC_LIST_URL: %s, AMF_LIST_URL: %s",
              "yes" if os.getenv("GOPLUS_BASE_URL") else "default",
              "yes" if os.getenv("ENS_PRIMARY_RPC") else "default",
              "yes" if os.getenv("ASIC_LIST_URL") else "default",
              "yes" if os.getenv("AMF_LIST_URL") else "default")

    engine = engine or ScanEngine(Sources.from_settings(settings))
    limiter = RateLimiter(settings.rate_limit, settings.rate_window, settings.rate_max_clients)

    app = FastAPI(title="Scam Radar API", version="1.0.0")
    app.state.engine = engine
    app.state.limiter = limiter

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    api = APIRouter(prefix="/api")

    def check_kind(kind: Optional[str]) -> None:
        if kind is not None and kind not in KINDS:
            raise HTTPException(status_code=400, detail=f"kind must be one of: {', '.join(sorted(KINDS))}")

    def check_input(value: Any) -> str:
        if not value or not isinstance(value, str):
            raise HTTPException(status_code=400, detail=ERR_INPUT)
        if len(value) > settings.max_input:
            raise HTTPException(status_code=400,
                                detail=f"Input too long. Maximum {settings.max_input} characters.")
        return value

    def throttle(request: Request) -> None:
        if limiter.hit(client_ip(request)):
            _log.info("[API] rate limit hit")
            raise HTTPException(status_code=429, detail=ERR_RATE)

    @api.get("/health")
    def health():
        return {"ok": True}

    # user input is never logged
    @api.post("/scan")
    async def scan(body: ScanRequest, request: Request):
        throttle(request)
        value = check_input(body.input)
        check_kind(body.kind)
        try:
            report = await engine.scan(value, body.kind)
        except Exception as e:
            _log.error("[API] /scan failed: %s", type(e).__name__)
            raise HTTPException(status_code=500, detail=ERR_SCAN)
        _log.info("[API] /scan -> %s %s %d", report.input_type.value, report.risk_level.value, report.risk_score)
        return report.to_dict()

    @api.post("/batch")
    async def batch(job: BatchRequest, request: Request):
        throttle(request)
        if not job.inputs:
            raise HTTPException(status_code=400, detail="inputs list is empty")
        if len(job.inputs) > MAX_BATCH:
            raise HTTPException(status_code=400, detail=f"At most {MAX_BATCH} inputs per batch.")
        values = [check_input(v) for v in job.inputs]
        check_kind(job.kind)
        try:
            reports = await engine.scan_many(values, job.kind)
        except Exception as e:
            _log.error("[API] /batch failed: %s", type(e).__name__)
            raise HTTPException(status_code=500, detail=ERR_SCAN)
        _log.info("[API] /batch completed -> %d results", len(reports))
        return {"count": len(reports), "results": [r.to_dict() for r in reports]}

    app.include_router(api)
    _log.info("[API] Router included at /api.")
    return app


app = create_app()

if __name__ == "__main__":
    import uvicorn

    uvicorn.run("api:app", host=os.getenv("HOST", "127.0.0.1"), port=int(os.getenv("PORT", "8000")))
