"""
Request dispatcher: maps a tool name to its handler and validates arguments.

Stateless apart from the store it is given; every call reads the store's
current snapshot.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from mcp.types import Resource, Tool
from pydantic import ValidationError

from curriculum_mcp.errors import InvalidRequestError, NotFoundError
from curriculum_mcp.models import Collection
from curriculum_mcp.store import CollectionStore
from curriculum_mcp.tools.catalog import CATALOGUE, RESOURCE_SCHEME, TOOL_REGISTRY, ToolSpec
from curriculum_mcp.tools.records import HANDLERS

logger = logging.getLogger("curriculum-mcp.dispatch")

_COLLECTIONS_BY_NAME = {collection.value.lower(): collection for collection in Collection}


def _format_validation_error(exc: ValidationError) -> str:
    problems = []
    for err in exc.errors():
        location = ".".join(str(part) for part in err["loc"]) or "arguments"
        problems.append(f"{location}: {err['msg']}")
    return "; ".join(problems)


def resource_collection(uri: str) -> Collection:
    """Resolve ``curriculum-mcp://<collection>`` to a Collection."""
    name = str(uri)
    if name.startswith(RESOURCE_SCHEME):
        name = name[len(RESOURCE_SCHEME) :]
    name = name.strip("/").lower()
    collection = _COLLECTIONS_BY_NAME.get(name)
    if collection is None:
        raise NotFoundError(f"Unknown resource: {uri}")
    return collection


class Dispatcher:
    """Routes tool calls and resource reads to the collection store."""

    def __init__(self, store: CollectionStore, registry: dict[str, ToolSpec] | None = None):
        self.store = store
        self.registry = registry if registry is not None else TOOL_REGISTRY

    def tools(self) -> list[Tool]:
        return [spec.to_tool() for spec in self.registry.values()]

    def resolve(self, name: str, arguments: dict[str, Any] | None) -> tuple[ToolSpec, Any]:
        """Look up a tool and validate its arguments. Raises InvalidRequestError."""
        spec = self.registry.get(name)
        if spec is None:
            raise InvalidRequestError(f"Unknown tool: {name}")
        try:
            args = spec.args_model.model_validate(arguments or {})
        except ValidationError as e:
            raise InvalidRequestError(
                f"Invalid arguments for {name}: {_format_validation_error(e)}"
            ) from e
        return spec, args

    def call(self, name: str, arguments: dict[str, Any] | None = None) -> str:
        """Run one tool and return its textual result."""
        spec, args = self.resolve(name, arguments)
        handler = HANDLERS[spec.operation]
        logger.debug(f"dispatch {name} -> {spec.operation} {spec.kind.collection.value}")
        return handler(self.store, spec.kind, args)

    def list_resources(self) -> list[Resource]:
        return [
            Resource(
                uri=kind.resource_uri,  # type: ignore[arg-type]
                name=kind.resource_name,
                description=kind.resource_description,
                mimeType="application/json",
            )
            for kind in CATALOGUE
        ]

    def read_resource(self, uri: str) -> str:
        """Full contents of the collection named by ``uri`` as JSON text."""
        collection = resource_collection(uri)
        return json.dumps(self.store.get_collection(collection), indent=2, ensure_ascii=False)
