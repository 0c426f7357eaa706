"""FastAPI application wiring for the RTIS trip audit."""

from __future__ import annotations

from fastapi import FastAPI
from fastapi.responses import JSONResponse

from rtis_audit import __version__
from rtis_audit.api.routes import analyze_router

app = FastAPI(title="RTIS Trip Audit", version=__version__)


@app.get("/health")
def health() -> JSONResponse:
    """Simple liveness endpoint used by deployment probes."""

    return JSONResponse({"status": "ok"})


app.include_router(analyze_router)


__all__ = ["app", "health"]
