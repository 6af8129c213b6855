"""
User Records Backend API Server
Core functionality: validated CRUD over a PostgreSQL users table, with a
deliberately insecure query-string creation endpoint for teaching purposes
"""

import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from config.settings import ALLOWED_ORIGINS
from database.connection import Database
from database.users_store import UserStore
from services.users_service import UsersService
from api.routes import health, users
from utils.error_handling import setup_error_handling

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager: owns the database pool"""
    database = Database()
    await database.connect()
    app.state.database = database
    app.state.users_service = UsersService(UserStore(database))
    try:
        yield
    finally:
        await database.close()

# FastAPI app initialization
app = FastAPI(
    title="User Records Backend",
    description="REST API example comparing secure (POST body) and insecure (GET query string) user creation",
    version="1.0.0",
    lifespan=lifespan
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["*"],
)

# Setup centralized error handling
setup_error_handling(app)

# Include API routes
app.include_router(health.router, prefix="/api", tags=["Health"])
app.include_router(users.router, prefix="/api", tags=["Users"])

# FastAPI app instance is exported for use by uvicorn
# Server startup is handled by main.py at the project root
