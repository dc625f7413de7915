"""Shared Jinja2 template loading with per-project override support."""

from __future__ import annotations

from pathlib import Path

from jinja2 import BaseLoader, ChoiceLoader, Environment, FileSystemLoader, PackageLoader, StrictUndefined


def build_template_environment(
    group: str,
    *,
    project_root: Path | None = None,
    extra_dir: Path | None = None,
) -> Environment:
    """Build a Jinja2 environment with user overrides before packaged defaults.

    Lookup order: *extra_dir* (``[output] templates``), then
    ``.cdpgen/templates/<group>/`` and ``.cdpgen/templates/`` inside the
    project, then the templates shipped with the package.
    """

    loaders: list[BaseLoader] = []
    if extra_dir is not None:
        loaders.append(FileSystemLoader(str(extra_dir)))
    if project_root is not None:
        template_root = project_root / ".cdpgen" / "templates"
        loaders.append(FileSystemLoader([str(template_root / group), str(template_root)]))

    loaders.append(PackageLoader("cdpgen", f"templates/{group}"))
    return Environment(
        loader=ChoiceLoader(loaders),
        keep_trailing_newline=True,
        trim_blocks=True,
        lstrip_blocks=True,
        undefined=StrictUndefined,
    )
