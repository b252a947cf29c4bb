from __future__ import annotations

from datetime import date
import logging

from openai import OpenAI

from .schema import DOCUMENT_TYPES
from .tracing import get_tracer, traced_generation

logger = logging.getLogger(__name__)

DOCUMENT_BRIEFS = {
    "projectbrief": (
        "Project Brief (projectbrief.md):\n"
        "   - Explain the general purpose and vision of the project\n"
        "   - List the main objectives\n"
        "   - Define the target audience\n"
        "   - Determine success criteria"
    ),
    "productContext": (
        "Product Context (productContext.md):\n"
        "   - Conduct market analysis\n"
        "   - Write user stories\n"
        "   - List requirements\n"
        "   - Define the product roadmap"
    ),
    "systemPatterns": (
        "System Patterns (systemPatterns.md):\n"
        "   - Explain the architectural design\n"
        "   - Define data models\n"
        "   - Show component structure\n"
        "   - List integration points"
    ),
    "techContext": (
        "Technology Context (techContext.md):\n"
        "   - List technologies used\n"
        "   - Define the development environment\n"
        "   - Explain the testing strategy\n"
        "   - Define the deployment process"
    ),
    "activeContext": (
        "Active Context (activeContext.md):\n"
        "   - Explain the current focus\n"
        "   - List ongoing tasks\n"
        "   - Specify known issues\n"
        "   - Explain next steps"
    ),
    "progress": (
        "Progress Report (progress.md):\n"
        "   - List completed work\n"
        "   - Specify milestones\n"
        "   - Maintain a changelog"
    ),
}


def _respond(prompt: str, model: str) -> str:
    client = OpenAI()
    response = client.responses.create(model=model, input=prompt)
    return response.output_text


def generate_content(prompt: str, model: str = "gpt-4.1-mini") -> str:
    """Run one prompt through the Responses API inside a `generation` span."""
    generate = traced_generation(_respond, get_tracer("memory-bank.generation"), model_name=model)
    return generate(prompt, model=model)


def build_document_prompt(goal: str, document_type: str, created_on: date | None = None) -> str:
    """Compose the generation prompt for one memory bank document.

    Args:
        goal: Free-text project goal supplied by the user.
        document_type: One of the standard document types.
        created_on: Date recorded in the generated document.

    Returns:
        Prompt text asking for Markdown with `##` section headings.
    """
    stamp = (created_on or date.today()).isoformat()
    brief = DOCUMENT_BRIEFS.get(document_type, f"{document_type} ({document_type}.md)")
    return (
        "You are a project documentation expert. You will create documentation "
        "for the following project.\n\n"
        f"PROJECT PURPOSE: {goal}\n\n"
        f"Document to create:\n{brief}\n\n"
        f'Create content only for the "{document_type}" document. Use Markdown with '
        "section headers marked by ##. Directly under the title add the line "
        f'"> Last Updated: {stamp}".'
    )


def generate_all_documents(goal: str, model: str = "gpt-4.1-mini") -> dict[str, str]:
    """Generate every standard document for a project goal.

    Args:
        goal: Free-text project goal.
        model: Chat model used for generation.

    Returns:
        Mapping of document type to generated Markdown.
    """
    documents: dict[str, str] = {}
    for document_type in DOCUMENT_TYPES:
        logger.info("Generating %s document", document_type)
        documents[document_type] = generate_content(build_document_prompt(goal, document_type), model=model)
    return documents


def regenerate_document(document_type: str, current_content: str, model: str = "gpt-4.1-mini") -> str:
    stamp = date.today().isoformat()
    prompt = (
        "You are a project documentation expert. Revise the following "
        f'"{document_type}" document so it is complete, consistent and current. '
        "Keep its existing ## section headings and facts, tighten the prose, and "
        f'set the "> Last Updated:" line to {stamp}.\n\n'
        f"Current document:\n{current_content}"
    )
    return generate_content(prompt, model=model)
