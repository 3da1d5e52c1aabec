from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
import os

from core.config import logger, ALLOWED_ORIGINS, STORE_LOCAL_ONLY  # type: ignore
from core.database import SessionLocal
from utils.editor import toast
from utils.fallback_store import NotFoundError
from utils.validation import ValidationFailure

# Routers
from routers import (
    products, series, creators, chapters, cart, coins,
    orders, featured, shop_all, pages, uploads, admin,
)  # type: ignore

app = FastAPI(title="Comic Storefront")

# ---- CORS setup ----
app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# --- Security headers ---
@app.middleware("http")
async def add_security_headers(request, call_next):
    response = await call_next(request)
    response.headers.setdefault("X-Content-Type-Options", "nosniff")
    response.headers.setdefault("Referrer-Policy", "strict-origin-when-cross-origin")
    response.headers.setdefault("X-Frame-Options", "DENY")
    response.headers.setdefault("Permissions-Policy", "geolocation=(), microphone=(), camera=()")
    return response


# --- Error boundary ---
@app.exception_handler(ValidationFailure)
async def _validation_failure(request: Request, ex: ValidationFailure):
    return JSONResponse({"ok": False, "error": ex.message, "field": ex.field, "toast": toast("Error", ex.message, "destructive")}, status_code=400)


@app.exception_handler(NotFoundError)
async def _not_found(request: Request, ex: NotFoundError):
    return JSONResponse({"ok": False, "error": str(ex), "toast": toast("Error", "Record not found", "destructive")}, status_code=404)


@app.exception_handler(Exception)
async def _unhandled(request: Request, ex: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}: {ex}")
    return JSONResponse({"ok": False, "error": "Internal server error", "toast": toast("Error", "Something went wrong", "destructive")}, status_code=500)


# ---- Static mount (local upload fallback) ----
static_dir = os.path.join(os.path.dirname(__file__), "static")
if os.path.isdir(static_dir):
    app.mount("/static", StaticFiles(directory=static_dir), name="static")


app.include_router(products.router)
app.include_router(series.router)
app.include_router(creators.router)
app.include_router(chapters.router)
app.include_router(chapters.pages_router)
app.include_router(cart.router)
app.include_router(coins.router)
app.include_router(orders.router)
app.include_router(featured.router)
app.include_router(shop_all.router)
app.include_router(pages.router)
app.include_router(uploads.router)
app.include_router(admin.router)


@app.on_event("startup")
async def _init_schema():
    try:
        from core.database import init_db
        init_db()
    except Exception as _ex:
        logger.warning(f"init_db failed: {_ex}")


@app.get("/api/health")
async def health():
    return {
        "ok": True,
        "database": SessionLocal is not None,
        "local_only": STORE_LOCAL_ONLY,
    }
