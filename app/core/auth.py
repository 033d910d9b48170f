"""
Authentication utilities for Supabase JWT verification.

Both the admin console and the tenant portal sign in with Supabase and send
the JWT in the Authorization header. This module verifies the JWT, extracts
the caller, and resolves the tenant row for tenant-portal requests.
"""
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import jwt, JWTError
from sqlalchemy.orm import Session
from typing import Optional
import requests

from app.api.deps import get_db
from app.core.config import settings
from app.models.tenant import Tenant

# Security scheme for Bearer token
security = HTTPBearer()


class User:
    """User model extracted from JWT token."""
    def __init__(self, user_id: str, email: str, role: Optional[str] = None):
        self.id = user_id
        self.email = email
        self.role = role or "tenant"  # Anyone not flagged admin is a tenant


# Cache for JWKS keys (to avoid fetching on every request)
_jwks_cache = None


def get_supabase_jwks():
    """
    Fetch Supabase's JSON Web Key Set (JWKS) for JWT verification.

    Returns:
        dict: JWKS containing public keys for token verification
    """
    global _jwks_cache

    if _jwks_cache is not None:
        return _jwks_cache

    try:
        jwks_url = f"{settings.SUPABASE_URL}/auth/v1/.well-known/jwks.json"
        response = requests.get(jwks_url, timeout=10)
        response.raise_for_status()
        _jwks_cache = response.json()
        return _jwks_cache
    except requests.RequestException as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to fetch JWKS from Supabase: {str(e)}",
        )


def verify_token(token: str) -> dict:
    """
    Verify Supabase JWT token and return decoded payload.

    Newer Supabase projects sign with ES256/RS256 (checked against the JWKS);
    legacy projects sign with HS256 using the project's JWT secret.

    Raises:
        HTTPException: If token is invalid or expired
    """
    try:
        header = jwt.get_unverified_header(token)
        if header.get("alg") == "HS256":
            key = settings.SUPABASE_JWT_SECRET
            algorithms = ["HS256"]
        else:
            key = get_supabase_jwks()
            algorithms = ["ES256", "RS256"]
        return jwt.decode(
            token,
            key,
            algorithms=algorithms,
            audience="authenticated",  # Supabase uses "authenticated" as audience
            options={"verify_aud": True},
        )
    except jwt.ExpiredSignatureError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token has expired",
            headers={"WWW-Authenticate": "Bearer"},
        )
    except JWTError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"Invalid authentication credentials: {str(e)}",
            headers={"WWW-Authenticate": "Bearer"},
        )


def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security)
) -> User:
    """
    FastAPI dependency to get current authenticated user from JWT token.

    The app role ("admin" / "tenant") lives in app_metadata, which only the
    service role can write; the top-level "role" claim is Supabase's own
    ("authenticated") and is ignored.
    """
    payload = verify_token(credentials.credentials)

    user_id = payload.get("sub")
    email = payload.get("email")
    role = (payload.get("app_metadata") or {}).get("role")

    if not user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate user",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return User(user_id=user_id, email=email, role=role)


def require_role(required_role: str):
    """
    Dependency factory for role-based access control.

    Usage:
        @router.delete("/{room_id}")
        def delete_room(room_id: str, current_user: User = Depends(require_admin)):
            ...
    """
    def role_checker(current_user: User = Depends(get_current_user)) -> User:
        if current_user.role != required_role:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Insufficient permissions. Required role: {required_role}",
            )
        return current_user
    return role_checker


require_admin = require_role("admin")


def get_current_tenant(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> Tenant:
    """Tenant row linked to the signed-in user; 404 when the account has none."""
    tenant = db.query(Tenant).filter(Tenant.user_id == current_user.id).first()
    if not tenant:
        raise HTTPException(status_code=404, detail="No tenant profile linked to this account")
    return tenant
