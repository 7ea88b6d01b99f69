"""
Nooklet models.

Usage:
    from nooklet.models import Nooklet, NookletCreate, NookletUpdate
    from nooklet.models import NookletType, AutoSaveState
    from nooklet.models import ChatResponse, DocumentCreated
"""

# --- Enums ---
from nooklet.models.enums import NookletType, AutoSaveState

# --- Domain models ---
from nooklet.models.domain import (
    Nooklet, NookletCreate, NookletUpdate,
    CreateNookletPayload, UpdateNookletPayload,
    NookletEnvelope, HomeView,
    AuthUser, Profile, AuthIdentity,
    RegisterRequest, LoginRequest, RegisteredUser, AccessToken,
    EmbedTextRequest, EmbedTextResult, RagChatRequest, RagChatResult,
)

# --- Result models ---
from nooklet.models.results import (
    BackboardResult,
    AssistantCreated, ThreadCreated,
    DocumentCreated, ChatResponse,
)

__all__ = [
    # Enums
    "NookletType", "AutoSaveState",
    # Domain
    "Nooklet", "NookletCreate", "NookletUpdate",
    "CreateNookletPayload", "UpdateNookletPayload",
    "NookletEnvelope", "HomeView",
    "AuthUser", "Profile", "AuthIdentity",
    "RegisterRequest", "LoginRequest", "RegisteredUser", "AccessToken",
    "EmbedTextRequest", "EmbedTextResult", "RagChatRequest", "RagChatResult",
    # Results
    "BackboardResult",
    "AssistantCreated", "ThreadCreated",
    "DocumentCreated", "ChatResponse",
]
