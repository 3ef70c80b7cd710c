"""
JSON Compare Backend - FastAPI Application Entry Point
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from routers import compare, config
from services.config_manager import ConfigManager


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager - startup and shutdown logic"""
    print("[Backend] Starting JSON Compare Backend...")
    config_manager = ConfigManager.get_instance()
    options = config_manager.get_diff_options()
    print(
        f"[Backend] ConfigManager initialized (identity fields: {list(options.identity_fields)}, "
        f"detect moves: {options.detect_moves})"
    )

    yield
    print("[Backend] Shutting down JSON Compare Backend...")


app = FastAPI(
    title="JSON Compare Backend",
    description="Structural JSON diff with line mapping and unified view",
    version="1.0.0",
    lifespan=lifespan,
)

# CORS middleware for the local compare view
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(compare.router, prefix="/api/compare", tags=["compare"])
app.include_router(config.router, prefix="/api/config", tags=["config"])


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {"status": "healthy", "service": "json-compare-backend"}


if __name__ == "__main__":
    import uvicorn

    server = ConfigManager.get_instance().get("server", {})
    uvicorn.run(app, host=server.get("host", "127.0.0.1"), port=server.get("port", 8000))
