"""
User record API routes
Both creation entry points share UsersService.create_user; they differ only
in where the fields come from and in what gets logged.
"""

import logging
from typing import Optional
from fastapi import APIRouter, Body, Depends, Request

from models.enums import CreateChannel
from models.user import UserCreateRequest, UserUpdateRequest
from services.users_service import UsersService, get_users_service
from utils.helpers import send_result

router = APIRouter()
logger = logging.getLogger(__name__)

@router.get("/users")
async def list_users(service: UsersService = Depends(get_users_service)):
    """List all users, newest first"""
    return send_result(await service.list_users())

@router.get("/users/{user_id}")
async def get_user(user_id: str, service: UsersService = Depends(get_users_service)):
    """Get a single user"""
    return send_result(await service.get_user(user_id))

@router.post("/users")
async def create_user(
    request: Optional[UserCreateRequest] = Body(None),
    service: UsersService = Depends(get_users_service)
):
    """Create a user from a JSON body (secure method)"""
    result = await service.create_user(request or UserCreateRequest(), CreateChannel.REQUEST_BODY)
    return send_result(result)

@router.get("/users-insecure/create")
async def create_user_insecure(
    request: Request,
    service: UsersService = Depends(get_users_service)
):
    """
    Create a user from URL query parameters (insecure method)

    Kept for teaching: the password travels in the URL and therefore ends up
    in browser history, proxy logs and this server's log.
    """
    params = dict(request.query_params)

    logger.warning("⚠️  SECURITY WARNING: Sensitive data exposed in URL!")
    logger.warning(f"URL Parameters: {params}")

    fields = UserCreateRequest.model_validate(params)
    result = await service.create_user(fields, CreateChannel.QUERY_STRING)
    return send_result(result)

@router.put("/users/{user_id}")
async def update_user(
    user_id: str,
    request: Optional[UserUpdateRequest] = Body(None),
    service: UsersService = Depends(get_users_service)
):
    """Update username, age and gender (password cannot be changed)"""
    result = await service.update_user(user_id, request or UserUpdateRequest())
    return send_result(result)

@router.delete("/users/{user_id}")
async def delete_user(user_id: str, service: UsersService = Depends(get_users_service)):
    """Delete a user permanently"""
    return send_result(await service.delete_user(user_id))
