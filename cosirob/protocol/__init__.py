# Cosirob line protocol
# - catalog:  declarative command schema (commands.json)
# - commands: channel-prefixed line encoder/validator
# - parsing:  tolerant token grammars for device replies
# - position: pose model, optimistic/confirmed tracking, move/home lines
from .catalog import CommandCatalog, load_catalog
from .commands import CommandEncoder
from .parsing import POSE_PRECISION, extract_triple, looks_like_channel_prefixed
from .position import Pose, PoseTracker, apply_optimistic, home_or_zero, to_move_command
from .types import (
    BackendResponse,
    CommandDefinition,
    CommandNotFound,
    ComposedCommand,
    ErrorKind,
    LogKind,
    ParamCountMismatch,
    ProtocolEvent,
    ValidationError,
)

__all__ = [
    "POSE_PRECISION",
    "BackendResponse",
    "CommandCatalog",
    "CommandDefinition",
    "CommandEncoder",
    "CommandNotFound",
    "ComposedCommand",
    "ErrorKind",
    "LogKind",
    "ParamCountMismatch",
    "Pose",
    "PoseTracker",
    "ProtocolEvent",
    "ValidationError",
    "apply_optimistic",
    "extract_triple",
    "home_or_zero",
    "load_catalog",
    "looks_like_channel_prefixed",
    "to_move_command",
]
