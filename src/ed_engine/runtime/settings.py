"""Editor settings resolved from ``ED_ENGINE_*`` environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from typing import Optional

ENV_PREFIX = "ED_ENGINE_"


def _env(name: str) -> Optional[str]:
    return os.environ.get(f"{ENV_PREFIX}{name}")


def _env_flag(name: str, default: bool) -> bool:
    raw = _env(name)
    if raw is None:
        return default
    return raw.lower() in {"1", "true", "yes", "on"}


@dataclass(frozen=True, slots=True)
class EditorSettings:
    prompt: str = ""
    show_errors: bool = False
    quiet: bool = False
    encoding: str = "utf-8"

    @classmethod
    def from_env(cls) -> "EditorSettings":
        return cls(
            prompt=_env("PROMPT") or "",
            show_errors=_env_flag("SHOW_ERRORS", False),
            quiet=_env_flag("QUIET", False),
            encoding=_env("ENCODING") or "utf-8",
        )

    def override(self, **changes: object) -> "EditorSettings":
        """Return a copy with every non-``None`` value in ``changes`` applied."""

        return replace(self, **{k: v for k, v in changes.items() if v is not None})


__all__ = ["EditorSettings"]
