# app/main.py
import logging

from fastapi import FastAPI

from app.api.routes import router as api_router
from app.config import settings

logging.basicConfig(
    level=settings.log_level,
    format="[%(asctime)s] [%(levelname)s] %(name)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)

app = FastAPI(title="GEO Score Analyzer")

app.include_router(api_router, prefix="/api")
