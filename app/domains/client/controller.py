"""Client session controller endpoints."""

from fastapi import APIRouter, Depends

from app.core.dependencies import get_current_principal, validate_token
from app.schemas.client import Principal, SessionResponse, SignOutResponse

router = APIRouter(prefix="/api/auth", tags=["Authentication"])


@router.get("/session", response_model=SessionResponse)
async def get_session(principal: Principal = Depends(get_current_principal)):
    """Return the signed-in client's profile.

    The profile record is created on the first request made with a new
    account's token.
    """
    return SessionResponse(client=principal)


@router.post("/signout", response_model=SignOutResponse)
async def signout(_payload: dict = Depends(validate_token)):
    """Sign-out acknowledgement.

    Sessions are revoked by the identity provider on the client side; this
    endpoint only confirms the token that was presented was valid.
    """
    return SignOutResponse()
