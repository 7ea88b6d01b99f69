"""
Enum definitions for the Nooklet API.
"""
from enum import Enum


class NookletType(str, Enum):
    """Kind of capture a nooklet came from."""
    JOURNAL = "journal"
    VOICE = "voice"
    QUICK_CAPTURE = "quick_capture"


class AutoSaveState(str, Enum):
    """States of the editor auto-save controller."""
    IDLE = "idle"
    EDITING = "editing"
    PENDING_SAVE = "pending_save"
    SAVING = "saving"
