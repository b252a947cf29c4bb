"""Session handle binding memory bank operations to one directory.

The active memory bank location lives on a :class:`MemoryBank` instance rather
than in module state, so several banks can be served side by side. The
retrieval and analysis core stays pure; this layer loads the corpus and rules
text from disk, calls the core and writes results back.
"""
from __future__ import annotations

import logging
from pathlib import Path

from .consistency import analyze
from .cursor_rules import generate_cursor_rules
from .errors import MemoryBankError, MemoryBankNotInitializedError, RulesNotFoundError
from .generation import generate_all_documents, regenerate_document
from .io_utils import (
    create_memory_bank_structure,
    export_memory_bank,
    read_all_documents,
    read_document,
    read_rules,
    save_document,
    write_default_rules,
)
from .retrieval import search
from .rules import extract_schema
from .schema import DOCUMENT_TYPES, ConsistencyReport, DocumentSchema, SearchHit
from .settings import OpenAISettings, Paths, load_settings
from .templates import build_template
from .tracing import get_tracer, traced_search

logger = logging.getLogger(__name__)


def _check_document_type(document_type: str) -> None:
    if document_type not in DOCUMENT_TYPES:
        raise MemoryBankError(f"Invalid document type: {document_type}")


def resolve_base_dir(location: str | Path | None) -> Path:
    """Resolve a user-supplied location against the working directory."""
    if not location:
        return Path.cwd()
    return Path(location).expanduser().resolve()


class MemoryBank:
    """Operations over one memory bank directory.

    Usage
    -----
    bank = MemoryBank()
    bank.initialize("A CLI that syncs dotfiles across machines", location="/work/dotsync")
    hits = bank.search("deployment process")
    reports = bank.analyze()
    """

    def __init__(
        self,
        directory: str | Path | None = None,
        settings: OpenAISettings | None = None,
        paths: Paths | None = None,
    ) -> None:
        if settings is None or paths is None:
            loaded_settings, loaded_paths = load_settings()
            settings = settings or loaded_settings
            paths = paths or loaded_paths
        self.settings = settings
        self.paths = paths
        self.directory = Path(directory) if directory is not None else None
        self._search = traced_search(search, get_tracer("memory-bank.search"))

    # ------------------------------------------------------------------
    # Location
    # ------------------------------------------------------------------

    def require_directory(self) -> Path:
        if self.directory is None:
            raise MemoryBankNotInitializedError(
                "Memory Bank not initialized. Please use initialize_memory_bank tool first."
            )
        return self.directory

    def document_path(self, document_type: str) -> Path:
        return self.require_directory() / f"{document_type}.md"

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def initialize(self, goal: str, location: str | Path | None = None) -> Path:
        """Create the directory, rules file, README and generated documents.

        Args:
            goal: Project goal used to generate the documents.
            location: Base directory; the memory bank folder is created inside it.

        Returns:
            Path of the new memory bank directory.
        """
        directory = resolve_base_dir(location) / self.paths.memory_bank_dirname
        logger.info("Creating memory bank at %s", directory)
        self.directory = directory

        write_default_rules(directory, filename=self.paths.rules_filename)
        create_memory_bank_structure(directory)

        documents = generate_all_documents(goal, model=self.settings.chat_model)
        for document_type, content in documents.items():
            save_document(content, self.document_path(document_type))
        return directory

    def update_document(self, document_type: str, content: str | None = None, regenerate: bool = False) -> Path:
        _check_document_type(document_type)
        path = self.document_path(document_type)
        if not path.exists():
            save_document(f"# {document_type}\n\n", path)

        if regenerate:
            current = read_document(path)
            save_document(regenerate_document(document_type, current, model=self.settings.chat_model), path)
        elif content:
            save_document(content, path)
        else:
            raise MemoryBankError("Content must be provided or regenerate=true")
        return path

    def read_document(self, document_type: str) -> str:
        _check_document_type(document_type)
        path = self.document_path(document_type)
        if not path.exists():
            save_document(f"# {document_type}\n\nThis document has not been created yet.", path)
        return read_document(path)

    def export(self, export_format: str = "folder", output_path: str | Path | None = None) -> Path:
        directory = self._existing_directory()
        target = Path(output_path).resolve() if output_path else Path.cwd() / self.paths.export_dirname
        logger.info("Exporting memory bank from %s to %s", directory, target)
        return export_memory_bank(directory, export_format, target)

    # ------------------------------------------------------------------
    # Retrieval and analysis
    # ------------------------------------------------------------------

    def corpus(self) -> dict[str, str]:
        return read_all_documents(self._existing_directory())

    def rules_text(self) -> str:
        """Rules document content, or an empty string when the file is missing.

        An empty rules text makes every schema fall back to its defaults.
        """
        try:
            return read_rules(self.require_directory(), filename=self.paths.rules_filename)
        except RulesNotFoundError:
            logger.warning("Rules file missing in %s, using default schemas", self.directory)
            return ""

    def search(self, query: str) -> list[SearchHit]:
        return self._search(query, self.corpus())

    def analyze(self) -> list[ConsistencyReport]:
        return analyze(self.rules_text(), self.corpus())

    def document_schema(self, document_type: str) -> DocumentSchema:
        return extract_schema(self.rules_text(), document_type)

    def document_template(self, document_type: str) -> str:
        return build_template(self.document_schema(document_type), document_type)

    def create_cursor_rules(self, purpose: str, location: str | Path | None = None) -> Path:
        cursor_dir = resolve_base_dir(location) / ".cursor"
        cursor_dir.mkdir(parents=True, exist_ok=True)
        rules_path = cursor_dir / "cursor-rules.mdc"
        save_document(generate_cursor_rules(purpose, model=self.settings.chat_model), rules_path)
        return rules_path

    def _existing_directory(self) -> Path:
        directory = self.require_directory()
        if not directory.is_dir():
            raise MemoryBankNotInitializedError(
                f"Memory Bank directory ({directory}) not found on disk. "
                "Please use initialize_memory_bank tool first."
            )
        return directory
