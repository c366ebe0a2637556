"""Security related functions."""

import jwt
from fastapi import HTTPException, status
from jwt import InvalidTokenError

from app.core.config import settings


class IdentityTokenVerifier:
    """
    Verifies access tokens issued by the hosted identity provider.

    The provider signs session JWTs with a shared secret; a verified payload
    carries the account id in ``sub``, the ``email`` and a free-form
    ``user_metadata`` object (``full_name``, ``company``, ``phone``).

    :ivar secret_key: The secret used to verify JWT signatures.
    :type secret_key: str
    :ivar audience: Expected ``aud`` claim, or None to skip the check.
    :type audience: str
    """

    def __init__(self, secret_key: str | None = None, audience: str | None = None):
        self.secret_key = secret_key or settings.identity_jwt_secret
        self.audience = audience if audience is not None else settings.identity_jwt_audience
        self.algorithm = settings.identity_jwt_algorithm

    async def verify_token(self, token: str) -> dict:
        """
        Verify the token's signature and expiry and return its payload.

        :param token: The JWT to verify.
        :return: The decoded payload.
        :raises HTTPException: 401 when the token is invalid, or when no
            verification secret is configured.
        """
        if not self.secret_key:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Session verification is not configured",
            )
        try:
            return jwt.decode(
                token,
                key=self.secret_key,
                algorithms=[self.algorithm],
                audience=self.audience,
                options={"verify_aud": self.audience is not None},
            )
        except InvalidTokenError as e:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail=f"Invalid authentication token: {str(e)}",
            ) from e
