"""
Engine options.

Options are passed explicitly to ``parse_expr``/``evaluate``; nothing is read
implicitly at import time. ``EvaluatorOptions.from_env()`` builds options from
the process environment for hosts that prefer that:

    EXPREVAL_ALLOW_TRAILING_TOKENS=1 expreval eval "1 2"
"""

from __future__ import annotations

import logging
import os

from pydantic import BaseModel, ConfigDict, Field

logger = logging.getLogger(__name__)

ALLOW_TRAILING_TOKENS_VAR = "EXPREVAL_ALLOW_TRAILING_TOKENS"

_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})
_FALSE_VALUES = frozenset({"0", "false", "no", "off"})


class EvaluatorOptions(BaseModel):
    """Tunable parsing behaviour."""

    allow_trailing_tokens: bool = Field(
        default=False,
        description="Ignore tokens left after a complete expression instead of failing",
    )

    model_config = ConfigDict(frozen=True)

    @classmethod
    def from_env(cls) -> EvaluatorOptions:
        """Load options from environment variables."""
        return cls(
            allow_trailing_tokens=_env_flag(ALLOW_TRAILING_TOKENS_VAR, default=False),
        )


def _env_flag(name: str, default: bool) -> bool:
    raw = os.environ.get(name, "").lower().strip()
    if raw == "":
        return default
    if raw in _TRUE_VALUES:
        return True
    if raw in _FALSE_VALUES:
        return False
    logger.warning(
        "Unknown %s value '%s'. Expected one of: %s. Using default '%s'.",
        name,
        raw,
        ", ".join(sorted(_TRUE_VALUES | _FALSE_VALUES)),
        default,
    )
    return default


DEFAULT_OPTIONS = EvaluatorOptions()
