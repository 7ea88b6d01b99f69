"""Domain models: nooklets, the identities that own them, and RAG payloads."""

from nooklet.models.domain.nooklet import (
    Nooklet,
    NookletCreate,
    NookletUpdate,
    CreateNookletPayload,
    UpdateNookletPayload,
    NookletEnvelope,
    HomeView,
)
from nooklet.models.domain.auth import (
    AuthUser,
    Profile,
    AuthIdentity,
    RegisterRequest,
    LoginRequest,
    RegisteredUser,
    AccessToken,
)
from nooklet.models.domain.rag import (
    EmbedTextRequest,
    EmbedTextResult,
    RagChatRequest,
    RagChatResult,
)

__all__ = [
    "Nooklet", "NookletCreate", "NookletUpdate",
    "CreateNookletPayload", "UpdateNookletPayload",
    "NookletEnvelope", "HomeView",
    "AuthUser", "Profile", "AuthIdentity",
    "RegisterRequest", "LoginRequest", "RegisteredUser", "AccessToken",
    "EmbedTextRequest", "EmbedTextResult", "RagChatRequest", "RagChatResult",
]
