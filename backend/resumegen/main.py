import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from resumegen.config import settings
from resumegen.errors import GenerationError
from resumegen.api import (
    catalog_routes,
    generate_routes,
    llm_routes,
)

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title=settings.app_name,
    version="0.1.0",
    description="Tailored, ATS-optimized resume PDFs from a stored profile and a job description",
)

# ── CORS ────────────────────────────────────────────────────────────────────

app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.frontend_url],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["Content-Disposition"],
)

# ── Errors ──────────────────────────────────────────────────────────────────


@app.exception_handler(GenerationError)
async def generation_error_handler(request: Request, exc: GenerationError):
    if exc.status_code >= 500:
        logger.error(f"{request.url.path} failed ({exc.kind}): {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_payload())


# ── Routers ─────────────────────────────────────────────────────────────────

app.include_router(generate_routes.router, prefix="/api", tags=["Generate"])
app.include_router(catalog_routes.router, prefix="/api", tags=["Catalog"])
app.include_router(llm_routes.router, prefix="/api/llm", tags=["LLM"])

# ── Health Check ────────────────────────────────────────────────────────────


@app.get("/api/health")
async def health_check():
    return {"status": "healthy", "app": settings.app_name, "version": "0.1.0"}
