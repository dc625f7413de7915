"""Schema sources: where protocol documents come from.

Two implementations share the :class:`SchemaSource` protocol:

- :class:`HttpSchemaSource` fetches documents pinned to a commit of the
  upstream devtools-protocol repository, optionally through a proxy.
- :class:`LocalSchemaSource` reads an offline copy from a directory.

Either failure mode surfaces as :class:`SchemaFetchError`, and a local file
that is not UTF-8 as :class:`SchemaParseError`. There are no retries at
this layer.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Protocol as TypingProtocol

import httpx

from cdpgen import __version__
from cdpgen.domain.errors import SchemaFetchError, SchemaParseError
from cdpgen.domain.schema import Protocol, parse_protocol

if TYPE_CHECKING:
    from collections.abc import Iterable

    from cdpgen.config.models import SourceConfig

logger = logging.getLogger(__name__)

USER_AGENT = f"cdpgen/{__version__}"


class SchemaSource(TypingProtocol):
    """Anything that can produce the raw text of a named schema document."""

    def read(self, file_name: str) -> str: ...

    def describe(self, file_name: str) -> str:
        """Human-readable location of *file_name*, used in error paths."""
        ...


class HttpSchemaSource:
    """Fetch schema documents over HTTP, pinned to *commit*.

    Documents live at ``{base_url}/{commit}/json/{file_name}``. A custom
    *transport* can be passed for tests (``httpx.MockTransport``).
    """

    def __init__(
        self,
        base_url: str,
        commit: str,
        *,
        timeout: float = 30.0,
        proxy: str | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.commit = commit
        self.timeout = timeout
        self.proxy = proxy
        self._transport = transport

    def url_for(self, file_name: str) -> str:
        return f"{self.base_url}/{self.commit}/json/{file_name}"

    def describe(self, file_name: str) -> str:
        return self.url_for(file_name)

    def _client(self) -> httpx.Client:
        return httpx.Client(
            timeout=httpx.Timeout(self.timeout),
            follow_redirects=True,
            proxy=self.proxy,
            transport=self._transport,
            headers={"User-Agent": USER_AGENT, "Accept": "application/json"},
        )

    def read(self, file_name: str) -> str:
        url = self.url_for(file_name)
        logger.debug("Fetching %s", url)
        try:
            with self._client() as client:
                resp = client.get(url)
                resp.raise_for_status()
        except httpx.HTTPStatusError as exc:
            msg = f"HTTP {exc.response.status_code} while fetching schema"
            raise SchemaFetchError(msg, path=url) from exc
        except httpx.HTTPError as exc:
            msg = f"Could not fetch schema: {exc}"
            raise SchemaFetchError(msg, path=url) from exc
        return resp.text


class LocalSchemaSource:
    """Read schema documents from a local directory (the offline copy)."""

    def __init__(self, directory: Path) -> None:
        self.directory = directory

    def describe(self, file_name: str) -> str:
        return str(self.directory / file_name)

    def read(self, file_name: str) -> str:
        path = self.directory / file_name
        logger.debug("Reading %s", path)
        try:
            return path.read_text(encoding="utf-8")
        except OSError as exc:
            msg = f"Could not read schema: {exc.strerror or exc}"
            raise SchemaFetchError(msg, path=str(path)) from exc
        except UnicodeDecodeError as exc:
            msg = f"Schema is not valid UTF-8 (byte {exc.start})"
            raise SchemaParseError(msg, path=str(path)) from exc


def build_source(config: SourceConfig, *, root: Path | None = None) -> SchemaSource:
    """Select the source described by *config*.

    ``local_dir`` is resolved against *root* when relative.
    """
    if config.offline:
        directory = Path(config.local_dir).expanduser()
        if not directory.is_absolute() and root is not None:
            directory = root / directory
        return LocalSchemaSource(directory)
    return HttpSchemaSource(
        config.base_url,
        config.commit,
        timeout=config.timeout_seconds,
        proxy=config.proxy,
    )


def load_protocol(source: SchemaSource, files: Iterable[str]) -> Protocol:
    """Read and decode every document in *files*, merged into one Protocol.

    Raises:
        SchemaFetchError: A document could not be read.
        SchemaParseError: A document is malformed.
    """
    documents = [
        parse_protocol(source.read(name), source=source.describe(name)) for name in files
    ]
    protocol = Protocol.merge(documents)
    logger.debug(
        "Loaded %d domains from %d documents",
        len(protocol.domains),
        len(documents),
    )
    return protocol
