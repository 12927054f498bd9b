from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from app.routes import health, profiles
from dotenv import load_dotenv
import logging
import os

load_dotenv()

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
)

app = FastAPI(
    redirect_slashes=False,
    title="Public Profiles",
    description="Server-rendered public user profiles",
    version="1.0.0",
    openapi_tags=[
        {
            "name": "Profiles",
            "description": "Read-only public profile pages",
        },
    ],
)

# Configure CORS
frontend_url = os.getenv("FRONTEND_URL")
if frontend_url:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[frontend_url],
        allow_credentials=True,
        allow_methods=["GET"],
        allow_headers=["*"],
    )

# Include routers
app.include_router(health.router)
app.include_router(profiles.router, prefix="/u", tags=["Profiles"])
