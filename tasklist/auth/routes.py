# =============================================================================
# Auth API Routes
# =============================================================================
#
# Endpoints:
#   POST /auth/register  - Create account, returns token + user
#   POST /auth/login     - Exchange credentials for token + user
#   POST /auth/logout    - Acknowledge logout (client discards token)
#   GET  /auth/profile   - Current user's profile (bearer)
#   PUT  /auth/profile   - Update first/last name (bearer)
#
# =============================================================================

from fastapi import APIRouter, Depends, Request

from tasklist.auth.context import AuthContext
from tasklist.auth.models import LoginRequest, ProfileUpdate, UserCreate
from tasklist.auth.policies import require_auth
from tasklist.auth.service import AuthService
from tasklist.core.models import UserResponse

router = APIRouter(prefix="/auth", tags=["auth"])


def get_auth_service(request: Request) -> AuthService:
    return request.app.state.auth_service


# =============================================================================
# Public Endpoints
# =============================================================================

@router.post("/register", status_code=201)
async def register(data: UserCreate, service: AuthService = Depends(get_auth_service)):
    """
    Create a new account.

    Returns a token immediately; no separate login needed.
    """
    result = await service.register(data)
    return {
        "message": "User registered successfully",
        "token": result.token,
        "user": result.user,
    }


@router.post("/login")
async def login(data: LoginRequest, service: AuthService = Depends(get_auth_service)):
    """
    Authenticate and get a fresh token.
    """
    result = await service.login(data)
    return {
        "message": "Login successful",
        "token": result.token,
        "user": result.user,
    }


@router.post("/logout")
async def logout():
    """
    Logout (client should discard its token).

    Tokens are not tracked server-side, so there is nothing to revoke.
    """
    return {"message": "Logged out successfully"}


# =============================================================================
# Protected Endpoints
# =============================================================================

@router.get("/profile", response_model=UserResponse)
async def get_profile(
    ctx: AuthContext = Depends(require_auth),
    service: AuthService = Depends(get_auth_service),
):
    return await service.get_profile(ctx.user_id)


@router.put("/profile")
async def update_profile(
    data: ProfileUpdate | None = None,
    ctx: AuthContext = Depends(require_auth),
    service: AuthService = Depends(get_auth_service),
):
    """
    Update the current user's name. Omitted fields are left unchanged.
    """
    user = await service.update_profile(ctx.user_id, data or ProfileUpdate())
    return {"message": "Profile updated successfully", "user": user}
