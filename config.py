"""
Application configuration, read from the environment once at startup.
"""

import os

DATABASE_URL = os.getenv("DATABASE_URL")
DATABASE_NAME = os.getenv("DATABASE_NAME")

SECRET_KEY = os.getenv("SECRET_KEY", "dev-only-secret-key-change-me-in-production")
JWT_ALGORITHM = "HS256"
JWT_EXPIRY_MINUTES = int(os.getenv("JWT_EXPIRY_MINUTES", str(7 * 24 * 60)))
BCRYPT_ROUNDS = int(os.getenv("BCRYPT_ROUNDS", "12"))

CLIENT_URL = os.getenv("CLIENT_URL", "http://localhost:5777")
CORS_ORIGINS = list(dict.fromkeys([
    CLIENT_URL,
    "http://localhost:5173",
    "http://localhost:5777",
    "http://localhost:3000",
]))

PORT = int(os.getenv("PORT", "4777"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Store rules
TAX_RATE = 0.08
FREE_SHIPPING_THRESHOLD = 50.0
SHIPPING_FEE = 9.99
LOW_STOCK_THRESHOLD = 10
SAR_RATE = 3.75

DEFAULT_LANGUAGE = os.getenv("DEFAULT_LANGUAGE", "ar")

# Keys the web client persists in local storage
STORAGE_KEYS = {
    "token": "accessToken",
    "user": "user",
    "theme": "theme",
    "language": "lang",
}
