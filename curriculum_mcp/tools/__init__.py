"""Curriculum MCP tools - entity catalogue and generic record handlers."""

from curriculum_mcp.tools.catalog import (  # noqa: F401
    CATALOGUE,
    KINDS_BY_COLLECTION,
    RESOURCE_SCHEME,
    TOOL_REGISTRY,
    EntityKind,
    ToolSpec,
    get_tool_registry,
    input_schema,
)
from curriculum_mcp.tools.records import HANDLERS, filter_records, project  # noqa: F401
