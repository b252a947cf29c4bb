"""
MCP server exposing memory bank tools over stdio.

Each tool call is validated with the pydantic models in
:mod:`memory_bank.tool_inputs`, executed against one :class:`MemoryBank`
session and answered with a single text block.
"""

import asyncio
import logging
import os
from typing import Callable, Optional

from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import TextContent, Tool
from openai import OpenAIError
from pydantic import BaseModel, ValidationError

from .errors import MemoryBankError, MemoryBankNotInitializedError
from .schema import ConsistencyReport, SearchHit, STATUS_GOOD
from .session import MemoryBank
from .tool_inputs import (
    CursorRulesInput,
    DocumentTypeInput,
    ExportInput,
    InitializeInput,
    QueryInput,
    UpdateDocumentInput,
)
from .tracing import configure_tracing

logger = logging.getLogger(__name__)

TOOL_ERRORS = (MemoryBankError, ValidationError, OSError, OpenAIError)


# =============================================================================
# Result formatting
# =============================================================================


def format_search_results(query: str, hits: list[SearchHit]) -> str:
    if not hits:
        return f'ℹ️ No results found for query "{query}".'
    formatted = "\n".join(f"📄 **{hit.document_name}**:\n{hit.snippet}\n" for hit in hits)
    return f'🔍 Results for query "{query}":\n\n{formatted}'


def format_reports(reports: list[ConsistencyReport]) -> str:
    if not reports:
        return "ℹ️ No standard documents found to analyze."
    lines = ["📋 Memory Bank consistency report:", ""]
    for report in reports:
        marker = "✅" if report.status == STATUS_GOOD else "⚠️"
        lines.append(f"{marker} **{report.document_type}** ({report.status}): {report.recommendation}")
    return "\n".join(lines)


# =============================================================================
# Tool handlers
# =============================================================================


def _initialize(bank: MemoryBank, inp: InitializeInput) -> str:
    directory = bank.initialize(inp.goal, inp.location)
    return f"✅ Memory Bank successfully created!\n\nLocation: {directory}"


def _update_document(bank: MemoryBank, inp: UpdateDocumentInput) -> str:
    bank.update_document(inp.document_type, content=inp.content, regenerate=inp.regenerate)
    return f'✅ "{inp.document_type}.md" document successfully updated!'


def _query(bank: MemoryBank, inp: QueryInput) -> str:
    return format_search_results(inp.query, bank.search(inp.query))


def _export(bank: MemoryBank, inp: ExportInput) -> str:
    exported = bank.export(inp.format, inp.output_path)
    label = "JSON file" if inp.format == "json" else "folder"
    return f"✅ Memory Bank successfully exported as {label}: {exported}"


def _analyze(bank: MemoryBank, inp: BaseModel) -> str:
    return format_reports(bank.analyze())


def _template(bank: MemoryBank, inp: DocumentTypeInput) -> str:
    return bank.document_template(inp.document_type)


def _read_document(bank: MemoryBank, inp: DocumentTypeInput) -> str:
    return bank.read_document(inp.document_type)


def _cursor_rules(bank: MemoryBank, inp: CursorRulesInput) -> str:
    path = bank.create_cursor_rules(inp.project_purpose, inp.location)
    return f"✅ Cursor Rules successfully created!\n\nLocation: {path}"


class _NoInput(BaseModel):
    pass


TOOLS: dict[str, tuple[type[BaseModel], Callable[[MemoryBank, BaseModel], str], str]] = {
    "initialize_memory_bank": (
        InitializeInput,
        _initialize,
        "Create a memory bank folder with a rules file and generated project documents.",
    ),
    "update_document": (
        UpdateDocumentInput,
        _update_document,
        "Replace a document's content or regenerate it with the model.",
    ),
    "query_memory_bank": (
        QueryInput,
        _query,
        "Search all memory bank documents and return the five best matching excerpts.",
    ),
    "export_memory_bank": (
        ExportInput,
        _export,
        "Export the memory bank as a folder copy or a JSON file.",
    ),
    "analyze_memory_bank": (
        _NoInput,
        _analyze,
        "Check every standard document against the rules file's required sections and freshness.",
    ),
    "get_document_template": (
        DocumentTypeInput,
        _template,
        "Build a skeleton document from the rules file's structure for a document type.",
    ),
    "read_document": (
        DocumentTypeInput,
        _read_document,
        "Return the current content of a memory bank document.",
    ),
    "create_cursor_rules": (
        CursorRulesInput,
        _cursor_rules,
        "Generate a .cursor/cursor-rules.mdc file tailored to the project purpose.",
    ),
}


def run_tool(bank: MemoryBank, name: str, arguments: Optional[dict]) -> str:
    """Validate arguments, run one tool and render its text response.

    Failures are reported as ``❌ Error: ...`` text rather than raised, so the
    host always receives a message. Unknown tool names raise ``ValueError``.
    """
    if name not in TOOLS:
        raise ValueError(f"Unknown tool: {name}")
    input_model, handler, _ = TOOLS[name]
    try:
        return handler(bank, input_model(**(arguments or {})))
    except MemoryBankNotInitializedError as exc:
        return f"ℹ️ {exc}"
    except TOOL_ERRORS as exc:
        logger.error("Tool %s failed: %s", name, exc)
        return f"❌ Error: {exc}"


# =============================================================================
# MCP Server Definition
# =============================================================================


def build_server(bank: Optional[MemoryBank] = None) -> Server:
    """Create an MCP server bound to one memory bank session."""
    bank = bank or MemoryBank()
    server = Server("memory-bank")

    @server.list_tools()
    async def list_tools() -> list[Tool]:
        return [
            Tool(name=name, description=description, inputSchema=model.model_json_schema())
            for name, (model, _, description) in TOOLS.items()
        ]

    @server.call_tool()
    async def call_tool(name: str, arguments: dict) -> list[TextContent]:
        return [TextContent(type="text", text=run_tool(bank, name, arguments))]

    return server


async def main() -> None:
    """Run the MCP server over stdio.

    Spans are exported only when `OTEL_EXPORTER_OTLP_TRACES_ENDPOINT` is set;
    stdout carries the protocol, so the console exporter is never used here.
    """
    logging.basicConfig(level=logging.INFO)
    endpoint = os.getenv("OTEL_EXPORTER_OTLP_TRACES_ENDPOINT")
    if endpoint:
        configure_tracing(endpoint=endpoint)
    server = build_server()
    async with stdio_server() as (read, write):
        await server.run(read, write, server.create_initialization_options())


def run() -> None:
    asyncio.run(main())


if __name__ == "__main__":
    run()
