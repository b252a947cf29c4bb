"""
Pydantic schemas for memory bank tool inputs.

These provide argument validation and JSON Schema generation for the MCP
tool definitions in :mod:`memory_bank.server`.
"""

from typing import Literal, Optional

from pydantic import BaseModel, Field

DocumentType = Literal[
    "projectbrief",
    "productContext",
    "systemPatterns",
    "techContext",
    "activeContext",
    "progress",
]


class InitializeInput(BaseModel):
    """Input for creating a new memory bank."""

    goal: str = Field(
        ...,
        min_length=10,
        description="Project goal used to generate the documents",
    )
    location: Optional[str] = Field(
        default=None,
        description="Absolute path where the memory-bank folder will be created",
    )


class UpdateDocumentInput(BaseModel):
    """Input for replacing or regenerating one document."""

    document_type: DocumentType
    content: Optional[str] = Field(default=None, description="New document body")
    regenerate: bool = Field(default=False, description="Regenerate the document with the model")


class QueryInput(BaseModel):
    """Input for free-text search across the memory bank."""

    query: str = Field(..., min_length=5, description="Search query, at least 5 characters")


class ExportInput(BaseModel):
    """Input for exporting the memory bank."""

    format: Literal["json", "folder"] = Field(default="folder", description="Export format")
    output_path: Optional[str] = Field(default=None, description="Export destination")


class DocumentTypeInput(BaseModel):
    """Input naming a single standard document."""

    document_type: DocumentType


class CursorRulesInput(BaseModel):
    """Input for generating a Cursor rules file."""

    project_purpose: str = Field(
        ...,
        min_length=10,
        description="Detailed description of the project's goals and scope",
    )
    location: Optional[str] = Field(
        default=None,
        description="Absolute path where the .cursor folder will be created",
    )
