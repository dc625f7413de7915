"""CompileService: fetch, compile, render, and write protocol bindings.

Pipeline phases are traced as child spans (``fetch``, ``compile``,
``render``, ``write``). Any :class:`CdpgenError` aborts the run and is
returned as a ServiceError; the target is left untouched on every failure.
"""

from __future__ import annotations

from collections import Counter
from pathlib import Path
from typing import TYPE_CHECKING, Any

import structlog

from cdpgen.compiler import compile_protocol
from cdpgen.domain.errors import CdpgenError
from cdpgen.infrastructure.filesystem import write_output
from cdpgen.infrastructure.sources import load_protocol
from cdpgen.services.base import BaseService
from cdpgen.services.result import ServiceError, ServiceResult
from cdpgen.services.telemetry import trace_span, traced

if TYPE_CHECKING:
    from cdpgen.domain.declarations import CompiledTree

log = structlog.get_logger(__name__)


class CompileService(BaseService):
    """Compile the configured schema documents into one Python module."""

    @traced
    def compile(self, *, output: Path | None = None, dry_run: bool = False) -> ServiceResult:
        """Run the full pipeline.

        Args:
            output: Target file; defaults to ``[output] path``.
            dry_run: Compile and render but do not write.
        """
        op = "compile"
        target = output or self._settings.resolve_path(self._settings.output.path)
        files = self._settings.source.files
        try:
            with trace_span("fetch") as span:
                protocol = load_protocol(self.source, files)
                if span:
                    span.annotate("documents", len(files))
            log.info("schema.loaded", domains=len(protocol.domains), files=list(files))

            with trace_span("compile"):
                tree = compile_protocol(protocol)

            with trace_span("render") as span:
                text = self.renderer.render(tree)
                if span:
                    span.annotate("bytes", len(text))

            written: str | None = None
            if not dry_run:
                with trace_span("write"):
                    written = str(write_output(target, text))
                log.info("compile.written", output=written, bytes=len(text))
        except CdpgenError as exc:
            log.warning("compile.failed", code=exc.code, path=exc.path, error=exc.message)
            return ServiceResult.failure(op, exc)

        counts = _tree_counts(tree)
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "output": written,
                "target": str(target),
                "dry_run": dry_run,
                "version": tree.version,
                "commit": self._settings.source.commit,
                "offline": self._settings.source.offline,
                "bytes": len(text),
                **counts,
            },
        )

    @traced
    def inspect(self, *, domain: str | None = None) -> ServiceResult:
        """Summarize the compiled tree without rendering.

        With *domain*, list that domain's declarations and methods.
        """
        op = "inspect"
        try:
            with trace_span("fetch"):
                protocol = load_protocol(self.source, self._settings.source.files)
            with trace_span("compile"):
                tree = compile_protocol(protocol)
        except CdpgenError as exc:
            return ServiceResult.failure(op, exc)

        if domain is not None:
            unit = tree.module(domain)
            if unit is None:
                known = ", ".join(u.domain for u in tree.modules)
                error = ServiceError(
                    code="UNKNOWN_DOMAIN",
                    message=f"No domain named {domain!r}",
                    detail={"domain": domain, "known": known},
                )
                return ServiceResult.failure(op, error)
            declarations: list[dict[str, Any]] = [
                {"name": d.name, "kind": d.kind} for d in unit.declarations()
            ]
            declarations.extend(
                {"name": f"events.{d.name}", "kind": d.kind}
                for d in unit.events.declarations()
            )
            return ServiceResult(
                ok=True,
                op=op,
                data={
                    "domain": unit.domain,
                    "imports": list(unit.imports),
                    "declarations": declarations,
                    "methods": [m.name for m in unit.methods],
                    "count": len(declarations),
                },
            )

        per_domain = Counter(v.payload.domain for v in tree.events.variants)
        domains = [
            {
                "name": unit.domain,
                "types": len(unit.aliases) + len(unit.enums) + len(unit.objects),
                "commands": len(unit.methods),
                "events": per_domain[unit.domain],
                "imports": list(unit.imports),
            }
            for unit in tree.modules
        ]
        return ServiceResult(
            ok=True,
            op=op,
            data={**_tree_counts(tree), "version": tree.version, "domains": domains},
        )


def _tree_counts(tree: CompiledTree) -> dict[str, int]:
    kinds: Counter[str] = Counter()
    for unit in tree.modules:
        for decl in unit.declarations():
            kinds[decl.kind] += 1
        for decl in unit.events.declarations():
            kinds[decl.kind] += 1
    return {
        "domains": len(tree.modules),
        "declarations": sum(kinds.values()),
        "methods": kinds["method"],
        "events": len(tree.events.variants),
    }
