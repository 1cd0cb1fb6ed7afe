import logging
from functools import lru_cache

from fastapi import Depends, FastAPI, HTTPException
from fastapi.concurrency import run_in_threadpool
from fastapi.middleware.cors import CORSMiddleware

from .config import load_settings
from .schemas import Brief, DebugResponse, DiagResponse, GenerateResponse
from .services.copy_generator import CopyGenerator

settings = load_settings()

logging.basicConfig(level=settings.log_level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logger = logging.getLogger(__name__)

app = FastAPI(title="Brand-in-a-Box API", version="1.0.0")

# Basic CORS to allow calls from a separate front end.
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)


@lru_cache(maxsize=1)
def get_generator() -> CopyGenerator:
    return CopyGenerator.from_settings(settings)


@app.post("/api/generate", response_model=GenerateResponse)
async def generate(payload: Brief, generator: CopyGenerator = Depends(get_generator)) -> GenerateResponse:
    if not payload.product.strip():
        raise HTTPException(status_code=400, detail="Missing product")
    try:
        return await run_in_threadpool(generator.generate, payload)
    except Exception as exc:
        logger.exception("Unexpected error during generation")
        raise HTTPException(status_code=500, detail="Server error") from exc


@app.get("/api/diag", response_model=DiagResponse)
async def diag(generator: CopyGenerator = Depends(get_generator)) -> DiagResponse:
    return generator.diagnostics()


@app.post("/api/debug", response_model=DebugResponse)
async def debug(payload: Brief, generator: CopyGenerator = Depends(get_generator)) -> DebugResponse:
    if not payload.product.strip():
        raise HTTPException(status_code=400, detail="Missing product")
    try:
        return await run_in_threadpool(generator.debug, payload)
    except Exception as exc:
        logger.exception("Unexpected error during provider debug run")
        raise HTTPException(status_code=500, detail="Server error") from exc


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("brandbox.main:app", host="0.0.0.0", port=8000, reload=True)
