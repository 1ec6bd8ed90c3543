"""
Tortoise ORM configuration for the optional database-backed cache.
"""
import os
from dotenv import load_dotenv

load_dotenv()

# Database configuration
DB_URL = os.getenv("DB_URL", "sqlite://travel_weather.sqlite3")

# Tortoise ORM configuration
TORTOISE_ORM = {
    "connections": {
        "default": DB_URL,
    },
    "apps": {
        "models": {
            "models": ["travel_api.database.models"],
            "default_connection": "default",
        }
    },
    "use_tz": True,
    "timezone": "UTC",
}
