"""Template engine configuration.

Typed settings for rendering and validation.  Uses a Pydantic v2 model so
values are validated at construction time and can be serialised to/from
JSON or read from environment variables.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field

_TRUE_WORDS = {"1", "true", "yes", "on"}


class EngineConfig(BaseModel):
    """Settings shared by the renderer and the validator.

    Instances are typically created once by the host application (or by the
    CLI) and passed to ``TemplateEngine``.
    """

    json_indent: int = Field(
        default=2, ge=0, description="Indent used when objects and arrays are rendered as JSON"
    )
    verbose: bool = Field(
        default=False, description="Echo render diagnostics to the console as warnings"
    )
    warn_unused_variables: bool = Field(
        default=True, description="Warn about context variables the template never uses"
    )

    # ------------------------------------------------------------------
    # Serialisation helpers
    # ------------------------------------------------------------------

    def save(self, path: Path) -> Path:
        """Persist the configuration to a JSON file.

        Args:
            path: Destination file. Parent directories are created.

        Returns:
            The path where the file was written.
        """
        target = Path(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(self.model_dump_json(indent=2), encoding="utf-8")
        return target

    @classmethod
    def load(cls, path: Path) -> "EngineConfig":
        """Load a previously-saved configuration from JSON."""
        raw = Path(path).read_text(encoding="utf-8")
        return cls.model_validate_json(raw)

    @classmethod
    def from_env(cls) -> "EngineConfig":
        """Build an ``EngineConfig`` from environment variables.

        Recognised variables (all optional):
            TPL_JSON_INDENT, TPL_VERBOSE, TPL_WARN_UNUSED.
        """
        kwargs: dict[str, Any] = {}
        if os.environ.get("TPL_JSON_INDENT"):
            kwargs["json_indent"] = int(os.environ["TPL_JSON_INDENT"])
        if os.environ.get("TPL_VERBOSE"):
            kwargs["verbose"] = os.environ["TPL_VERBOSE"].strip().lower() in _TRUE_WORDS
        if os.environ.get("TPL_WARN_UNUSED"):
            kwargs["warn_unused_variables"] = (
                os.environ["TPL_WARN_UNUSED"].strip().lower() in _TRUE_WORDS
            )
        return cls(**kwargs)
