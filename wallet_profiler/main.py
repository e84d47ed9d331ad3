from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from .api import analyze, debug, health, networks, tokens, zapper
from .config import settings
from .logging_config import setup_logging
from .middleware import RateLimitMiddleware, RequestLoggingMiddleware

setup_logging()

# Create FastAPI app
app = FastAPI(
    title="Wallet Profiler API",
    description="Multi-network wallet portfolio analysis and token recommendations",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc"
)

# Middleware added last runs first: CORS, then logging, then rate limiting
if settings.enable_rate_limit:
    app.add_middleware(RateLimitMiddleware)
app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization", "x-request-id"],
    expose_headers=["X-RateLimit-Limit", "X-RateLimit-Remaining", "X-RateLimit-Reset", "x-request-id"],
)

# Include routers
app.include_router(health.router, tags=["Health"])
app.include_router(zapper.router, tags=["Zapper"])
app.include_router(tokens.router, tags=["Tokens"])
app.include_router(networks.router, tags=["Networks"])
app.include_router(analyze.router, tags=["Analysis"])
app.include_router(debug.router, tags=["Debug"])


@app.get("/")
async def root():
    """Root endpoint with basic info"""
    return {
        "name": "Wallet Profiler API",
        "version": "0.1.0",
        "description": "Multi-network wallet portfolio analysis and token recommendations",
        "docs": "/docs",
        "health": "/healthz"
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "wallet_profiler.main:app",
        host=settings.host,
        port=settings.port,
        reload=True,
        log_level=settings.log_level.lower()
    )
