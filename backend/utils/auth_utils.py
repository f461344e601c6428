from typing import Any, Dict

from fastapi import HTTPException, Request, status
from jose import jwt
from jose.exceptions import ExpiredSignatureError, JWTClaimsError, JWTError

import config


def create_access_token(user_id: str, extra_claims: Dict[str, Any] = None) -> str:
    """
    Issues a signed bearer token for `user_id`.

    Tokens are normally issued by the identity provider; this helper exists
    for local tooling and the test-suite.
    """
    claims = {"sub": user_id}
    if extra_claims:
        claims.update(extra_claims)
    return jwt.encode(claims, config.AUTH_SECRET_KEY, algorithm=config.AUTH_ALGORITHM)


def get_current_user(request: Request) -> Dict[str, Any]:
    """
    FastAPI dependency to validate the bearer token from the Authorization header.

    Usage:
        @router.post("/", dependencies=[Depends(get_current_user)])
        def secure_endpoint():
            ...
    """
    auth_header = request.headers.get("Authorization")
    if not auth_header:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authorization header is missing",
        )

    # The token is expected to be in the format "Bearer <token>"
    parts = auth_header.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authorization header format",
        )

    token = parts[1]
    try:
        payload = jwt.decode(
            token,
            config.AUTH_SECRET_KEY,
            algorithms=[config.AUTH_ALGORITHM],
        )
    except ExpiredSignatureError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token has expired"
        )
    except JWTClaimsError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"Invalid token claims: {e}"
        )
    except JWTError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"Token validation failed: {e}"
        )

    if not payload.get("sub") and not payload.get("username"):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token does not identify a user"
        )
    return payload


def get_user_identifier(user: Dict[str, Any]) -> str:
    """Returns the trusted user id carried by a validated token payload."""
    return user.get("sub") or user.get("username")
