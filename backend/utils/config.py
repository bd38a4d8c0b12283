"""
Configuration module for ChurchOS.
Handles app configuration, session storage, and cache initialization.
"""

import logging
import os
import tempfile
from datetime import timedelta
import redis
from flask_session import Session
from flask_caching import Cache
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

logger = logging.getLogger(__name__)


def _env_flag(name, default=False):
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def get_redis_url():
    """Get Redis URL with proper SSL configuration for Heroku"""
    redis_url = os.getenv("REDIS_URL")

    if redis_url and redis_url.startswith("rediss://") and "ssl_cert_reqs" not in redis_url:
        return redis_url + "?ssl_cert_reqs=none"
    return redis_url


def load_config(app, overrides=None):
    """Populate ``app.config`` from the environment, then apply ``overrides``"""
    app.config["SECRET_KEY"] = os.getenv("SECRET_KEY", "your-secret-key-change-in-production")
    app.config["DATABASE_URL"] = os.getenv("DATABASE_URL")
    app.config["REDIS_URL"] = get_redis_url()
    app.config["AUTO_LOGIN_EMAIL"] = os.getenv("AUTO_LOGIN_EMAIL")
    app.config["SEED_DEMO_DATA"] = _env_flag("SEED_DEMO_DATA", default=True)
    app.config["LOG_LEVEL"] = os.getenv("LOG_LEVEL", "INFO")
    app.config["SOCKETIO_ASYNC_MODE"] = os.getenv("SOCKETIO_ASYNC_MODE", "threading")
    app.config["STATS_CACHE_TIMEOUT"] = int(os.getenv("STATS_CACHE_TIMEOUT", "60"))

    app.config["SESSION_COOKIE_NAME"] = "churchos_session"
    app.config["SESSION_COOKIE_HTTPONLY"] = True
    app.config["SESSION_COOKIE_SAMESITE"] = "Lax"
    app.config["PERMANENT_SESSION_LIFETIME"] = timedelta(hours=24)

    if overrides:
        app.config.update(overrides)


def configure_session_storage(app):
    """Configure server-side session storage.

    Production keeps sessions in Redis when ``REDIS_URL`` is set, development
    uses the filesystem. With ``SESSION_TYPE`` explicitly set to None (tests)
    Flask's own signed cookie session is used instead of Flask-Session.
    """
    if "SESSION_TYPE" not in app.config:
        if os.getenv("FLASK_ENV") == "production" and app.config.get("REDIS_URL"):
            app.config["SESSION_TYPE"] = "redis"
            app.config["SESSION_REDIS"] = redis.from_url(app.config["REDIS_URL"])
            app.config["SESSION_COOKIE_SECURE"] = True
            logger.info("Using Redis for session storage (production)")
        else:
            app.config["SESSION_TYPE"] = "filesystem"
            app.config.setdefault(
                "SESSION_FILE_DIR", os.path.join(tempfile.gettempdir(), "churchos_sessions")
            )
            logger.info("Using filesystem for session storage")

    if not app.config.get("SESSION_TYPE"):
        logger.info("Using signed cookie sessions")
        return False

    app.config.setdefault("SESSION_PERMANENT", True)
    app.config.setdefault("SESSION_USE_SIGNER", True)
    app.config.setdefault("SESSION_KEY_PREFIX", "churchos:")
    Session(app)
    return True


def configure_cache(app):
    """Flask-Caching backed by Redis when available, in-memory otherwise"""
    if "CACHE_TYPE" not in app.config:
        if app.config.get("REDIS_URL"):
            app.config["CACHE_TYPE"] = "RedisCache"
            app.config["CACHE_REDIS_URL"] = app.config["REDIS_URL"]
            logger.info("Using Redis for caching")
        else:
            app.config["CACHE_TYPE"] = "SimpleCache"
            logger.info("Redis not configured, using simple memory cache")
    app.config.setdefault("CACHE_DEFAULT_TIMEOUT", 300)

    return Cache(app)


def init_app(app, overrides=None):
    """Initialize Flask app with configuration and return cache instance"""
    load_config(app, overrides)
    configure_session_storage(app)
    cache = configure_cache(app)
    logger.info("Configuration and caching initialized successfully")
    return cache
