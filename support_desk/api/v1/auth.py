"""Dashboard authentication endpoints."""

import logging

from fastapi import APIRouter
from sqlalchemy.exc import IntegrityError

from support_desk.api.deps import CurrentUser, DbSession
from support_desk.core.exceptions import BadRequestError, UnauthorizedError
from support_desk.core.jwt import create_access_token
from support_desk.core.security import hash_password, verify_password
from support_desk.db.repositories import OrganizationRepository, UserRepository
from support_desk.models import UserRole
from support_desk.schemas import LoginRequest, RegisterRequest, TokenResponse, UserDetail

router = APIRouter(prefix="/auth", tags=["auth"])
logger = logging.getLogger(__name__)

EMAIL_TAKEN = "A user with this email already exists"


@router.post("/register", response_model=TokenResponse, status_code=201)
async def register(data: RegisterRequest, db: DbSession):
    """Create an organization and its first administrator."""
    user_repo = UserRepository(db)
    if await user_repo.get_by_email(data.email):
        raise BadRequestError(EMAIL_TAKEN)

    organization = await OrganizationRepository(db).add(name=data.organization_name)
    try:
        user = await user_repo.add(
            name=data.name,
            email=data.email.lower(),
            password_hash=hash_password(data.password),
            role=UserRole.ADMIN,
            organization_id=organization.id,
        )
        await db.commit()
    except IntegrityError:
        # Race condition: the same email registered concurrently
        await db.rollback()
        raise BadRequestError(EMAIL_TAKEN)

    logger.info(f"Registered organization {organization.id} with admin {user.id}")
    return TokenResponse(
        token=create_access_token(user.id),
        user=UserDetail.model_validate(user),
    )


@router.post("/login", response_model=TokenResponse)
async def login(data: LoginRequest, db: DbSession):
    """Exchange email and password for a session token."""
    user = await UserRepository(db).get_by_email(data.email)
    if user is None or not verify_password(data.password, user.password_hash):
        raise UnauthorizedError("Invalid email or password")

    return TokenResponse(
        token=create_access_token(user.id),
        user=UserDetail.model_validate(user),
    )


@router.get("/me", response_model=UserDetail)
async def me(user: CurrentUser):
    """Get the authenticated user."""
    return user


@router.post("/logout", status_code=204)
async def logout(user: CurrentUser):
    """End the dashboard session.

    Tokens are stateless, so the client discards its copy; this only confirms
    the token was still valid.
    """
    logger.info(f"User {user.id} logged out")
