from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import logging

from cartify.config import get_settings
from cartify.routers import addresses, users

settings = get_settings()

logging.basicConfig(level=settings.LOG_LEVEL, format="%(asctime)s [%(levelname)s] %(name)s: %(message)s")

app = FastAPI(title="Cartify")

@app.on_event("startup")
def on_startup():
    # Ensure all DB tables exist after all models are imported
    from cartify.models.user import Base, engine  # Base/engine single source
    import cartify.models.address  # register Address model
    Base.metadata.create_all(bind=engine)
    logging.getLogger(__name__).info("Database tables ready")

# CORS configuration for frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(users.router, prefix="/api/users", tags=["users"])
app.include_router(addresses.router, prefix="/api/addresses", tags=["addresses"])


# --- Entry point for local runs ---
if __name__ == "__main__":
    import uvicorn
    uvicorn.run("cartify.main:app", host="0.0.0.0", port=settings.PORT, reload=False)
