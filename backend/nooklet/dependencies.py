"""
Dependency injection for FastAPI routes.

Provides typed service dependencies that enable IDE navigation (Ctrl+Click).
"""

from typing import Annotated, Optional
from fastapi import Depends, Header, HTTPException, Request, status

from nooklet.errors import AuthError
from nooklet.models import AuthIdentity
from nooklet.services.auth import AuthService
from nooklet.services.nooklets import NookletService
from nooklet.services.profiles import ProfileService
from nooklet.services.rag import RagService


def get_auth_service(request: Request) -> AuthService:
    return request.app.state.auth_service


def get_profile_service(request: Request) -> ProfileService:
    return request.app.state.profile_service


def get_nooklet_service(request: Request) -> NookletService:
    return request.app.state.nooklet_service


def get_rag_service(request: Request) -> RagService:
    return request.app.state.rag_service


AuthServiceDep = Annotated[AuthService, Depends(get_auth_service)]
ProfileServiceDep = Annotated[ProfileService, Depends(get_profile_service)]
NookletServiceDep = Annotated[NookletService, Depends(get_nooklet_service)]
RagServiceDep = Annotated[RagService, Depends(get_rag_service)]


def get_identity(
    auth: AuthServiceDep,
    authorization: Annotated[Optional[str], Header(alias="Authorization")] = None,
) -> AuthIdentity | None:
    """
    Resolve the caller from a Bearer token.

    A missing header means an anonymous request; a malformed or
    invalid token is rejected with 401.
    """
    if not authorization:
        return None

    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token:
        raise HTTPException(
            status.HTTP_401_UNAUTHORIZED,
            "Authorization header must be in format: Bearer <token>",
        )

    try:
        return auth.validate_token(token)
    except AuthError as exc:
        raise HTTPException(exc.status_code, exc.message) from exc


IdentityDep = Annotated[Optional[AuthIdentity], Depends(get_identity)]
