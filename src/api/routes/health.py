"""
Health check API route
"""

from fastapi import APIRouter

from utils.helpers import send_response

router = APIRouter()

@router.get("/health")
async def health_check():
    """
    Liveness check - reports the process as up without touching the database

    Database problems surface on the user endpoints as 500 responses instead.
    """
    return send_response(200, True, "Server is running")
