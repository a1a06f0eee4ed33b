import logging
from logging.handlers import RotatingFileHandler

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from quotewise.config import settings

# ─── Logging setup (file + console) ───
settings.log_dir.mkdir(parents=True, exist_ok=True)

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s %(levelname)-8s [%(name)s] %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
    handlers=[
        logging.StreamHandler(),
        RotatingFileHandler(
            settings.log_dir / "quotewise.log",
            maxBytes=10 * 1024 * 1024,  # 10 MB
            backupCount=5,
            encoding="utf-8",
        ),
    ],
)

# Quiet noisy libraries
logging.getLogger("uvicorn.access").setLevel(logging.WARNING)

from quotewise.routers import availability, quotes, rates

logger = logging.getLogger(__name__)


app = FastAPI(
    title="QuoteWise",
    description="Itinerary Pricing Engine",
    version="0.1.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origin_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(quotes.router, prefix="/api/quotes", tags=["quotes"])
app.include_router(rates.router, prefix="/api/rates", tags=["rates"])
app.include_router(availability.router, prefix="/api/availability", tags=["availability"])


@app.get("/api/health")
async def health_check():
    return {"status": "ok", "service": "quotewise"}
