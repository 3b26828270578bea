import os
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from .routers import habitt as habitt_router
from .routers import settings as settings_router
from .middleware.auth import APIKeyMiddleware
from .middleware.logging import LoggingMiddleware


app = FastAPI(title="habitt", version="0.1.0")

# Configure CORS - localhost for development, explicit origins otherwise
app_env = os.getenv("APP_ENV")
is_dev = app_env is None or app_env.lower() in {"dev", "development"}

if is_dev:
    app.add_middleware(
        CORSMiddleware,
        allow_origin_regex=r"^https?://(localhost|127\.0\.0\.1)(:\d+)?$",
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        max_age=86400,
    )
else:
    allowed = [o.strip() for o in os.getenv("CORS_ORIGINS", "").split(",") if o.strip()]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=allowed,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        max_age=86400,
    )

app.add_middleware(APIKeyMiddleware)
app.add_middleware(LoggingMiddleware)

app.include_router(habitt_router.router)
app.include_router(settings_router.router)


@app.get("/__health")
def health():
    return {"ok": True}


@app.get("/")
def root():
    return {"message": "habitt API is running. POST a block to /v1/habitt/render."}
