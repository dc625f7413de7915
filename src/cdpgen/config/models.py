"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, cdpgen.toml only contains overrides.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

DEFAULT_BASE_URL = "https://raw.githubusercontent.com/ChromeDevTools/devtools-protocol"
DEFAULT_COMMIT = "15f524c8f5ce5b317ddcdf5e6f875d6eb8bdac88"
DEFAULT_FILES = ("js_protocol.json", "browser_protocol.json")


class SourceConfig(BaseModel):
    """[source] section: where schema documents come from.

    ``offline`` swaps the live fetch for the pinned copy in ``local_dir``.
    """

    model_config = {"frozen": True}

    base_url: str = DEFAULT_BASE_URL
    commit: str = DEFAULT_COMMIT
    files: tuple[str, ...] = DEFAULT_FILES
    offline: bool = False
    local_dir: str = "schema"
    proxy: str | None = None
    timeout_seconds: float = Field(default=30.0, gt=0)


class OutputConfig(BaseModel):
    """[output] section."""

    model_config = {"frozen": True}

    path: str = "protocol.py"
    templates: str | None = None


class CdpgenConfig(BaseModel):
    """Root configuration composing all sections."""

    model_config = {"frozen": True}

    source: SourceConfig = Field(default_factory=SourceConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
