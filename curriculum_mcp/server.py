#!/usr/bin/env python3
"""
Curriculum MCP Server - Model Context Protocol interface to the curriculum datastore.

Supports stdio transport.
Run with: python -m curriculum_mcp.server

Surface:
- 52 tools: list/get for all 13 collections, create/update/delete where the
  entity kind supports them
- 13 resources: curriculum-mcp://<collection>, full collection as JSON
"""  # noqa: I001

from __future__ import annotations

import asyncio
import json
import logging
import sys
import time
from typing import Any

from mcp import McpError
from mcp.server import Server
from mcp.server.lowlevel.helper_types import ReadResourceContents
from mcp.server.stdio import stdio_server
from mcp.types import (
    INTERNAL_ERROR,
    CallToolResult,
    ErrorData,
    Resource,
    TextContent,
    Tool,
)

from curriculum_mcp import __version__
from curriculum_mcp.config import McpConfig, load_config
from curriculum_mcp.dispatch import Dispatcher
from curriculum_mcp.errors import CurriculumError, StorageError, error_kind
from curriculum_mcp.observability import (
    ROOT_LOGGER,
    TEXT_FORMAT,
    ObservabilityContext,
    setup_logging,
)
from curriculum_mcp.prompts import INSTRUCTIONS
from curriculum_mcp.store import CollectionStore

logger = logging.getLogger(ROOT_LOGGER)


def configure_logging(config: McpConfig) -> None:
    """Route package logs to stderr per config (stdout carries the protocol)."""
    if config.observability.enabled:
        setup_logging(config.observability, ROOT_LOGGER)
        return
    logging.basicConfig(
        level=logging.INFO,
        format=TEXT_FORMAT,
        stream=sys.stderr,
    )
    log_level = getattr(logging, config.server.log_level.upper(), logging.INFO)
    logging.getLogger().setLevel(log_level)
    logger.setLevel(log_level)


def tool_error(exc: BaseException) -> CallToolResult:
    """Error result for a failed tool call, carrying the machine-readable error kind."""
    body = {"error": f"Tool execution failed: {exc}", "kind": error_kind(exc)}
    return CallToolResult(
        content=[TextContent(type="text", text=json.dumps(body))],
        structuredContent=body,
        isError=True,
    )


class CurriculumMcpServer:
    """Curriculum MCP Server implementation."""

    def __init__(self, config: McpConfig, store: CollectionStore | None = None):
        self.config = config
        self.server = Server("curriculum-mcp", version=__version__, instructions=INSTRUCTIONS)
        self.obs = ObservabilityContext(config.observability)

        # Load failures are fatal: StorageError propagates to the caller
        self.store = store or CollectionStore(
            config.store.resolved_path(), indent=config.store.indent
        )
        self.dispatcher = Dispatcher(self.store)
        self.tools: list[Tool] = self.dispatcher.tools()

        self._register_handlers()
        logger.info(
            f"Curriculum MCP Server initialized ({len(self.tools)} tools, store={self.store.path})"
        )

    def _register_handlers(self):
        """Register MCP protocol handlers."""

        @self.server.list_tools()
        async def list_tools() -> list[Tool]:
            logger.debug("list_tools called")
            return self.tools

        @self.server.call_tool(validate_input=False)
        async def call_tool(name: str, arguments: dict) -> list[TextContent] | CallToolResult:
            return await self.handle_call_tool(name, arguments)

        @self.server.list_resources()
        async def list_resources() -> list[Resource]:
            return self.dispatcher.list_resources()

        @self.server.read_resource()
        async def read_resource(uri: Any) -> list[ReadResourceContents]:
            return await self.handle_read_resource(str(uri))

    async def handle_call_tool(
        self, name: str, arguments: dict[str, Any] | None
    ) -> list[TextContent] | CallToolResult:
        """
        Run a tool with observability.

        Failures come back as an error result (``isError``) whose JSON body is
        ``{"error": "Tool execution failed: <message>", "kind": <error kind>}``.
        The same object is attached as ``structuredContent``.
        """
        cid = self.obs.correlation_id()
        start_time = time.time()

        logger.info(f"call_tool: {name}", extra={"correlation_id": cid, "tool": name})

        try:
            text = self.dispatcher.call(name, arguments)
        except Exception as e:
            kind = error_kind(e)
            latency_ms = (time.time() - start_time) * 1000
            extra = {
                "correlation_id": cid,
                "tool": name,
                "latency_ms": latency_ms,
                "status": "error",
                "error": str(e),
                "kind": kind,
            }
            if isinstance(e, CurriculumError) and not isinstance(e, StorageError):
                logger.warning(f"Tool {name} failed: {e}", extra=extra)
            else:
                logger.exception(f"Tool {name} failed: {e}", extra=extra)
            self.obs.record(cid, name, latency_ms=latency_ms, success=False, error_kind=kind)
            return tool_error(e)

        latency_ms = (time.time() - start_time) * 1000
        self.obs.record(cid, name, latency_ms=latency_ms, success=True)
        logger.info(
            f"call_tool done: {name}",
            extra={
                "correlation_id": cid,
                "tool": name,
                "latency_ms": latency_ms,
                "status": "ok",
            },
        )
        return [TextContent(type="text", text=text)]

    async def handle_read_resource(self, uri: str) -> list[ReadResourceContents]:
        logger.debug(f"read_resource: {uri}")
        try:
            text = self.dispatcher.read_resource(uri)
        except CurriculumError as e:
            raise McpError(
                ErrorData(
                    code=INTERNAL_ERROR,
                    message=f"Failed to read resource: {e}",
                    data={"kind": e.kind},
                )
            ) from e
        return [ReadResourceContents(content=text, mime_type="application/json")]

    async def run(self):
        """Run the server with stdio transport."""
        logger.info("Starting Curriculum MCP server (stdio transport)")
        try:
            async with stdio_server() as (read_stream, write_stream):
                await self.server.run(
                    read_stream,
                    write_stream,
                    self.server.create_initialization_options(),
                )
        finally:
            if self.obs.enabled:
                logger.info(f"Session metrics: {self.obs.get_stats()}")


def serve(config: McpConfig) -> int:
    """Build the server from config and run it until stdin closes. Returns an exit code."""
    if not config.enabled:
        logger.warning("MCP server disabled in config, exiting")
        return 0

    try:
        server = CurriculumMcpServer(config)
    except StorageError as e:
        logger.error(f"Cannot start: {e}")
        return 1

    asyncio.run(server.run())
    return 0


def main():
    """Entry point for the curriculum MCP server."""
    import argparse

    parser = argparse.ArgumentParser(description="Curriculum MCP Server")
    parser.add_argument(
        "--config",
        "-c",
        help="Path to curriculum.toml config file",
        default=None,
    )
    parser.add_argument(
        "--log-level",
        "-l",
        choices=["debug", "info", "warning", "error"],
        default=None,
        help="Override log level",
    )
    parser.add_argument(
        "--db",
        help="Override datastore path",
        default=None,
    )
    args = parser.parse_args()

    try:
        config = load_config(args.config)
    except (OSError, ValueError) as e:
        # tomllib.TOMLDecodeError is a ValueError
        logger.error(f"Invalid configuration: {e}")
        sys.exit(1)

    if args.log_level:
        config.server.log_level = args.log_level
        config.observability.log_level = args.log_level
    if args.db:
        config.store.path = args.db

    configure_logging(config)

    logger.info(f"Config loaded: enabled={config.enabled}, store={config.store.path}")
    obs = config.observability
    logger.info(f"Observability: enabled={obs.enabled}, log_format={obs.log_format}")

    sys.exit(serve(config))


if __name__ == "__main__":
    main()
