"""BaseService, the foundation for cdpgen services.

Every service receives the resolved :class:`CdpgenSettings` at construction
time. Collaborators (schema source, renderer) are built from settings on
first use unless injected, which keeps tests free of network access.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from cdpgen.infrastructure.renderer import PythonRenderer
from cdpgen.infrastructure.sources import build_source

if TYPE_CHECKING:
    from cdpgen.config.settings import CdpgenSettings
    from cdpgen.infrastructure.sources import SchemaSource


class BaseService:
    """Abstract base for service-layer classes.

    Usage::

        class CompileService(BaseService):
            def compile(self) -> ServiceResult:
                protocol = load_protocol(self.source, self._settings.source.files)
                ...
    """

    def __init__(
        self,
        settings: CdpgenSettings,
        *,
        source: SchemaSource | None = None,
        renderer: PythonRenderer | None = None,
    ) -> None:
        self._settings = settings
        self._source = source
        self._renderer = renderer

    @property
    def source(self) -> SchemaSource:
        if self._source is None:
            self._source = build_source(self._settings.source, root=self._settings.project_root)
        return self._source

    @property
    def renderer(self) -> PythonRenderer:
        if self._renderer is None:
            templates = self._settings.output.templates
            self._renderer = PythonRenderer(
                project_root=self._settings.project_root,
                template_dir=self._settings.resolve_path(templates) if templates else None,
            )
        return self._renderer
