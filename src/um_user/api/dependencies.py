"""FastAPI dependencies for um_user.

The service is built once in the app lifespan and stored on app.state;
tests replace it with app.dependency_overrides[get_user_service].
"""

from fastapi import Request

from src.um_user.application.service import UserAccessService


def get_user_service(request: Request) -> UserAccessService:
    return request.app.state.user_service
