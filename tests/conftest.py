"""Shared pytest fixtures for cdpgen tests."""

from __future__ import annotations

import copy
import itertools
import json
import os
import sys
import types
from collections.abc import Callable, Iterator
from contextlib import ExitStack, contextmanager
from pathlib import Path
from typing import Any

import pytest
from click.testing import CliRunner

from cdpgen.compiler import compile_protocol
from cdpgen.domain.declarations import CompiledTree
from cdpgen.domain.schema import Protocol
from cdpgen.infrastructure.renderer import PythonRenderer
from cdpgen.services.telemetry import disable_telemetry

JS_PROTOCOL: dict[str, Any] = {
    "version": {"major": "1", "minor": "3"},
    "domains": [
        {
            "domain": "Runtime",
            "description": "Runtime domain exposes JavaScript runtime by remote evaluation.",
            "types": [
                {"id": "RemoteObjectId", "type": "string"},
                {
                    "id": "RemoteObject",
                    "type": "object",
                    "description": "Mirror object referencing original JavaScript object.",
                    "properties": [
                        {
                            "name": "type",
                            "type": "string",
                            "enum": ["object", "function", "undefined"],
                        },
                        {"name": "objectId", "$ref": "RemoteObjectId", "optional": True},
                        {"name": "value", "type": "any", "optional": True},
                    ],
                },
                {
                    "id": "StackTrace",
                    "type": "object",
                    "properties": [
                        {"name": "description", "type": "string", "optional": True},
                        {"name": "parent", "$ref": "StackTrace", "optional": True},
                    ],
                },
            ],
            "commands": [
                {"name": "enable"},
                {
                    "name": "evaluate",
                    "parameters": [
                        {"name": "expression", "type": "string"},
                        {"name": "returnByValue", "type": "boolean", "optional": True},
                    ],
                    "returns": [{"name": "result", "$ref": "RemoteObject"}],
                },
            ],
            "events": [
                {"name": "executionContextsCleared"},
                {
                    "name": "consoleAPICalled",
                    "parameters": [
                        {"name": "type", "type": "string", "enum": ["log", "debug"]},
                        {"name": "args", "type": "array", "items": {"$ref": "RemoteObject"}},
                    ],
                },
            ],
        }
    ],
}

BROWSER_PROTOCOL: dict[str, Any] = {
    "version": {"major": "1", "minor": "3"},
    "domains": [
        {
            "domain": "Target",
            "types": [{"id": "TargetID", "type": "string"}],
            "commands": [
                {
                    "name": "attachToTarget",
                    "parameters": [
                        {"name": "targetId", "$ref": "TargetID"},
                        {"name": "flatten", "type": "boolean", "optional": True},
                    ],
                    "returns": [{"name": "sessionId", "type": "string"}],
                }
            ],
            "events": [
                {
                    "name": "targetDestroyed",
                    "parameters": [{"name": "targetId", "$ref": "TargetID"}],
                }
            ],
        },
        {
            "domain": "DOM",
            "dependencies": ["Runtime"],
            "types": [
                {"id": "NodeId", "type": "integer"},
                {"id": "Quad", "type": "array", "items": {"type": "number"}},
                {
                    "id": "PseudoType",
                    "type": "string",
                    "enum": ["first-line", "before", "after"],
                },
                {
                    "id": "Node",
                    "type": "object",
                    "properties": [
                        {"name": "nodeId", "$ref": "NodeId"},
                        {"name": "nodeName", "type": "string"},
                        {
                            "name": "children",
                            "type": "array",
                            "optional": True,
                            "items": {"$ref": "Node"},
                        },
                        {"name": "contentDocument", "$ref": "Node", "optional": True},
                        {"name": "pseudoType", "$ref": "PseudoType", "optional": True},
                    ],
                },
                {
                    "id": "BoxModel",
                    "type": "object",
                    "properties": [
                        {"name": "content", "$ref": "Quad"},
                        {
                            "name": "shapeOutside",
                            "type": "object",
                            "optional": True,
                            "properties": [
                                {
                                    "name": "bounds",
                                    "type": "array",
                                    "items": {"type": "array", "items": {"type": "number"}},
                                }
                            ],
                        },
                    ],
                },
                {"id": "Rect", "type": "object"},
            ],
            "commands": [
                {"name": "getDocument", "returns": [{"name": "root", "$ref": "Node"}]},
                {
                    "name": "resolveNode",
                    "parameters": [{"name": "nodeId", "$ref": "NodeId", "optional": True}],
                    "returns": [{"name": "object", "$ref": "Runtime.RemoteObject"}],
                },
            ],
            "events": [
                {"name": "documentUpdated"},
                {
                    "name": "setChildNodes",
                    "parameters": [
                        {"name": "parentId", "$ref": "NodeId"},
                        {"name": "nodes", "type": "array", "items": {"$ref": "Node"}},
                    ],
                },
            ],
        },
        {
            "domain": "Input",
            "commands": [
                {
                    "name": "dispatchMouseEvent",
                    "parameters": [
                        {"name": "type", "type": "string", "enum": ["mouseWheel", "mousePressed"]},
                        {"name": "x", "type": "number"},
                    ],
                },
                {
                    "name": "emulateTouchFromMouseEvent",
                    "parameters": [
                        {
                            "name": "type",
                            "type": "string",
                            "enum": ["mouseWheel", "mouseReleased"],
                        }
                    ],
                },
            ],
        },
    ],
}


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture(autouse=True)
def _no_config_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep a developer's CDPGEN_* environment out of every test."""
    for name in [n for n in os.environ if n.startswith("CDPGEN_")]:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture(autouse=True)
def _reset_telemetry() -> Iterator[None]:
    """Turn telemetry back off after tests that pass ``-v``."""
    yield
    disable_telemetry()


@pytest.fixture
def js_doc() -> dict[str, Any]:
    return copy.deepcopy(JS_PROTOCOL)


@pytest.fixture
def browser_doc() -> dict[str, Any]:
    return copy.deepcopy(BROWSER_PROTOCOL)


@pytest.fixture
def protocol(js_doc: dict[str, Any], browser_doc: dict[str, Any]) -> Protocol:
    """Both sample documents merged, js first (default file order)."""
    return Protocol.merge([Protocol.model_validate(js_doc), Protocol.model_validate(browser_doc)])


@pytest.fixture
def tree(protocol: Protocol) -> CompiledTree:
    return compile_protocol(protocol)


@pytest.fixture
def schema_dir(tmp_path: Path, js_doc: dict[str, Any], browser_doc: dict[str, Any]) -> Path:
    """Offline schema copy with the default file names."""
    directory = tmp_path / "schema"
    directory.mkdir()
    (directory / "js_protocol.json").write_text(json.dumps(js_doc), encoding="utf-8")
    (directory / "browser_protocol.json").write_text(json.dumps(browser_doc), encoding="utf-8")
    return directory


@pytest.fixture
def offline_project(
    tmp_path: Path,
    schema_dir: Path,
    monkeypatch: pytest.MonkeyPatch,
) -> Path:
    """Project directory configured for offline compilation, used as CWD."""
    (tmp_path / "cdpgen.toml").write_text(
        '[source]\noffline = true\nlocal_dir = "schema"\n\n[output]\npath = "out/protocol.py"\n',
        encoding="utf-8",
    )
    monkeypatch.chdir(tmp_path)
    return tmp_path


@contextmanager
def _load_generated(
    tree: CompiledTree, name: str = "cdpgen_generated_protocol"
) -> Iterator[types.ModuleType]:
    """Render *tree* and import the result as a real module named *name*."""
    source = PythonRenderer().render(tree)
    module = types.ModuleType(name)
    module.__file__ = f"<{name}>"
    sys.modules[name] = module
    try:
        exec(compile(source, module.__file__, "exec"), module.__dict__)
        yield module
    finally:
        sys.modules.pop(name, None)


@pytest.fixture
def generated(tree: CompiledTree) -> Iterator[types.ModuleType]:
    with _load_generated(tree) as module:
        yield module


@pytest.fixture
def generate_module() -> Iterator[Callable[[dict[str, Any]], types.ModuleType]]:
    """Compile a schema document and import the rendered module."""
    counter = itertools.count()
    with ExitStack() as stack:

        def _generate(doc: dict[str, Any]) -> types.ModuleType:
            tree = compile_protocol(Protocol.model_validate(doc))
            name = f"cdpgen_generated_{next(counter)}"
            return stack.enter_context(_load_generated(tree, name))

        yield _generate
