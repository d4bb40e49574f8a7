"""
Configuration — loads from .env, provides defaults.
"""

import os
from dotenv import load_dotenv

load_dotenv()

# Weather provider
WEATHER_API_KEY = os.getenv("WEATHER_API_KEY", "")
WEATHER_API_URL = os.getenv("WEATHER_API_URL", "https://api.weatherapi.com/v1/current.json")
WEATHER_TIMEOUT = float(os.getenv("WEATHER_TIMEOUT", "10"))  # seconds

# Telegram (optional; the web widget runs alone when unset)
TELEGRAM_BOT_TOKEN = os.getenv("TELEGRAM_BOT_TOKEN", "")

# Web widget
WEB_HOST = os.getenv("WEB_HOST", "127.0.0.1")
WEB_PORT = int(os.getenv("WEB_PORT", "8080"))
WEB_SECRET = os.getenv("WEB_SECRET", "change-me-in-production")

# Logging
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# Sessions (chats / browsers) kept in memory; least recently used is evicted
MAX_SESSIONS = int(os.getenv("MAX_SESSIONS", "1000"))
