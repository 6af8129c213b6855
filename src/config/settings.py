"""
Configuration settings for the User Records Backend
"""

import os
import logging

logger = logging.getLogger(__name__)

# Database connection (PostgreSQL)
DB_HOST = os.getenv("DB_HOST", "localhost")
DB_PORT = int(os.getenv("DB_PORT", 5432))
DB_USER = os.getenv("DB_USER", "postgres")
DB_PASSWORD = os.getenv("DB_PASSWORD", "")
DB_NAME = os.getenv("DB_NAME", "postgres")

# HTTP server
PORT = int(os.getenv("PORT", 5000))

# Pool sizing is not part of the environment surface
# min_size=0 lets the server start while PostgreSQL is still unreachable
DB_POOL_MIN_SIZE = 0
DB_POOL_MAX_SIZE = 10
DB_COMMAND_TIMEOUT = 60

# CORS settings - the demo frontend is served from its own dev server
ALLOWED_ORIGINS = ["*"]

logger.info(f"Database target: {DB_USER}@{DB_HOST}:{DB_PORT}/{DB_NAME}")
