"""Analog Designer Backend — FastAPI application entry point."""

import logging
import os

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from analog_backend.routes import design, insights
from analog_backend.middleware.rate_limit import RateLimitMiddleware

load_dotenv()

logging.basicConfig(level=os.getenv("LOG_LEVEL", "INFO"))

app = FastAPI(
    title="Analog Designer API",
    description="Analog filter response simulation and component synthesis",
    version="0.1.0",
)

# CORS: allow frontend origins
_frontend_url = os.getenv("FRONTEND_URL")
app.add_middleware(
    CORSMiddleware,
    allow_origins=[_frontend_url] if _frontend_url else [],
    allow_origin_regex=r"^https?://(localhost|127\.0\.0\.1)(:\d+)?$",
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Rate limiting: 60 req/min general, 10 req/min for AI routes
app.add_middleware(
    RateLimitMiddleware,
    requests_per_minute=int(os.getenv("RATE_LIMIT_PER_MINUTE", "60")),
    ai_requests_per_minute=int(os.getenv("AI_RATE_LIMIT_PER_MINUTE", "10")),
)

# Register route modules
app.include_router(design.router, prefix="/api", tags=["Design"])
app.include_router(insights.router, prefix="/api", tags=["AI Insights"])


@app.get("/api/health")
async def health_check():
    return {"status": "healthy", "service": "analog-designer-backend"}
