from .action_registry import (
    ActionHandler as ActionHandler,
    ActionRegistry as ActionRegistry,
)
from .default_registry import build_default_registry as build_default_registry
