from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List

from ..errors import ConfigError

DEFAULT_TEMPLATE_ROOT = "templates"
DEFAULT_ENCODING = "utf-8"
DEFAULT_RECURSION_LIMIT = 64
# Include nesting must stay well within the interpreter stack
MAX_RECURSION_LIMIT = 128


@dataclass
class EngineConfig:
    """
    Engine settings (ftl.yaml).

    Attributes:
        template_root: Directory of the file loader, relative to the config file
        default_encoding: Charset used when #include does not specify one
        recursion_limit: Maximum nesting depth of #include (1 to MAX_RECURSION_LIMIT)
        exclude: gitwildmatch patterns of template names that are never loaded
        shared_variables: Variables visible to every render, looked up last
    """
    template_root: str = DEFAULT_TEMPLATE_ROOT
    default_encoding: str = DEFAULT_ENCODING
    recursion_limit: int = DEFAULT_RECURSION_LIMIT
    exclude: List[str] = field(default_factory=list)
    shared_variables: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        if not 1 <= self.recursion_limit <= MAX_RECURSION_LIMIT:
            raise ConfigError(
                f"$.recursion_limit: must be a positive number not above {MAX_RECURSION_LIMIT}, "
                f"got {self.recursion_limit}"
            )


__all__ = [
    "EngineConfig",
    "DEFAULT_TEMPLATE_ROOT",
    "DEFAULT_ENCODING",
    "DEFAULT_RECURSION_LIMIT",
    "MAX_RECURSION_LIMIT",
]
