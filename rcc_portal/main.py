import logging
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from rcc_portal.core.config import CORS_ORIGINS, MEDIA_URL, get_media_dir
from rcc_portal.core.logging_config import configure_logging
from rcc_portal.database.db import Base, engine
from rcc_portal.models import events, news, prayer_groups, profiles, registrations  # noqa: F401
from rcc_portal.routes import auth, news as news_routes, prayer_groups as prayer_group_routes
from rcc_portal.routes import events as event_routes, profiles as profile_routes
from rcc_portal.routes import registrations as registration_routes

configure_logging()
logger = logging.getLogger(__name__)

app = FastAPI(title="RCC Portal")

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Create all tables (in production, use migrations such as Alembic)
Base.metadata.create_all(bind=engine)

media_dir = get_media_dir()
Path(media_dir).mkdir(parents=True, exist_ok=True)
app.mount(MEDIA_URL, StaticFiles(directory=media_dir), name="static")

# Include the routers
app.include_router(auth.router)
app.include_router(event_routes.router)
app.include_router(registration_routes.router)
app.include_router(news_routes.router)
app.include_router(prayer_group_routes.router)
app.include_router(profile_routes.router)

logger.info("RCC Portal started, serving media from %s", media_dir)
