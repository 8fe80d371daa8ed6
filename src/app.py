"""Stockroom FastAPI application.

Processes product and stock-movement commands synchronously over HTTP. Every
request runs inside the stockroom domain context.

Usage:
    uvicorn app:app --app-dir src --host 0.0.0.0 --port 8000 --reload
"""

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from stockroom.api import product_router, register_exception_handlers
from stockroom.domain import stockroom
from stockroom.product.registry import registry
from stockroom.utils.logging import add_context, clear_context

# ---------------------------------------------------------------------------
# Domain initialization
# ---------------------------------------------------------------------------
# Initialized at module level so uvicorn workers share it. Domain modules are
# imported above so that initialization registers them only once.
stockroom.init()

# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------
app = FastAPI(
    title="Stockroom API",
    description="Products, stock levels and their most recent stock movements",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def domain_context_middleware(request: Request, call_next):
    """Push the stockroom domain context and bind request details to the log context."""
    add_context(method=request.method, path=request.url.path)
    try:
        with stockroom.domain_context():
            return await call_next(request)
    finally:
        clear_context()


# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------
app.include_router(product_router)
register_exception_handlers(app)


# ---------------------------------------------------------------------------
# Health / root
# ---------------------------------------------------------------------------
@app.get("/health")
async def health():
    return JSONResponse(
        content={
            "status": "ok",
            "domain": stockroom.name,
            "products": len(registry),
        }
    )
