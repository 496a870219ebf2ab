"""
Admin management of student assistants and students.

Both collections expose the same five operations, so the routes are
registered once per role.
"""
from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from thesis_archive.core.database import get_db
from thesis_archive.models.user import User, UserRole
from thesis_archive.modules.auth.dependencies import get_current_admin
from thesis_archive.schemas.common import MessageResponse
from thesis_archive.schemas.user import ManagedUserCreate, ManagedUserUpdate, UserResponse
from thesis_archive.services import user_service

router = APIRouter(dependencies=[Depends(get_current_admin)])


def register_role_routes(prefix: str, role: UserRole, label: str) -> None:
    async def list_accounts(db: AsyncSession = Depends(get_db)):
        users = await user_service.list_users(db, role)
        return [UserResponse.model_validate(u) for u in users]

    async def get_account(user_id: str, db: AsyncSession = Depends(get_db)):
        return UserResponse.model_validate(await user_service.get_user(db, role, user_id))

    async def create_account(data: ManagedUserCreate, db: AsyncSession = Depends(get_db)):
        return UserResponse.model_validate(await user_service.create_user(db, role, data))

    async def update_account(user_id: str, data: ManagedUserUpdate, db: AsyncSession = Depends(get_db)):
        return UserResponse.model_validate(await user_service.update_user(db, role, user_id, data))

    async def delete_account(user_id: str, db: AsyncSession = Depends(get_db)):
        await user_service.delete_user(db, role, user_id)
        return MessageResponse(message=f"{label} deleted successfully")

    name = prefix.strip("/").replace("-", "_")
    router.add_api_route(prefix, list_accounts, methods=["GET"], response_model=List[UserResponse], name=f"list_{name}")
    router.add_api_route(prefix, create_account, methods=["POST"], response_model=UserResponse,
                         status_code=status.HTTP_201_CREATED, name=f"create_{name}")
    router.add_api_route(f"{prefix}/{{user_id}}", get_account, methods=["GET"], response_model=UserResponse,
                         name=f"get_{name}")
    router.add_api_route(f"{prefix}/{{user_id}}", update_account, methods=["PUT"], response_model=UserResponse,
                         name=f"update_{name}")
    router.add_api_route(f"{prefix}/{{user_id}}", delete_account, methods=["DELETE"], response_model=MessageResponse,
                         name=f"delete_{name}")


register_role_routes("/student-assistants", UserRole.STUDENT_ASSISTANT, "Student assistant")
register_role_routes("/students", UserRole.STUDENT, "Student")
