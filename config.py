"""
Runtime settings for the coupon service.

Values come from the environment (a local .env file is loaded first).
"""
import os
from dotenv import load_dotenv

load_dotenv()

API_TITLE = os.getenv("API_TITLE", "Coupon Management API")
API_VERSION = os.getenv("API_VERSION", "1.0.0")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Comma separated list, e.g. "http://localhost:3000,http://127.0.0.1:5500"
CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "").split(",") if o.strip()]
