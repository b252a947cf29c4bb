from __future__ import annotations

from datetime import date

from .generation import generate_content

PROJECT_TYPE_KEYWORDS = [
    ("frontend", ["frontend", "web", "site", "ui"]),
    ("backend", ["backend", "api", "service"]),
    ("mobile", ["mobile", "android", "ios"]),
    ("fullstack", ["fullstack", "full-stack"]),
    ("data", ["data", "analytics", "ml", "ai"]),
    ("devops", ["devops", "infrastructure", "cloud"]),
]


def detect_project_type(purpose: str) -> str:
    """Classify a project purpose by the first keyword group it mentions.

    Args:
        purpose: Free-text project description.

    Returns:
        Project type label, ``general`` when nothing matches.
    """
    lowered = purpose.lower()
    for project_type, keywords in PROJECT_TYPE_KEYWORDS:
        if any(keyword in lowered for keyword in keywords):
            return project_type
    return "general"


def build_cursor_rules_prompt(purpose: str, project_type: str, today: date | None = None) -> str:
    stamp = (today or date.today()).isoformat()
    return (
        f"As a software development expert, you are creating Cursor rules for the {purpose} project.\n\n"
        "PROJECT DETAILS:\n"
        f"- PURPOSE: {purpose}\n"
        f"- TYPE: {project_type}\n"
        f"- DATE: {stamp}\n\n"
        "Use ## headings for main sections and ### for subsections. Cover the project overview, "
        f"code structure for {project_type} projects, coding standards, development workflow, "
        "testing requirements, documentation standards and deployment strategy. "
        "Every guideline must be specific and actionable, with short good and bad examples."
    )


def generate_cursor_rules(purpose: str, model: str = "gpt-4.1-mini") -> str:
    """Generate a Cursor rules file body (front matter included) for a project."""
    project_type = detect_project_type(purpose)
    body = generate_content(build_cursor_rules_prompt(purpose, project_type), model=model)
    frontmatter = (
        "---\n"
        f"description: Main development guidelines for the {purpose} project\n"
        "globs: **/*\n"
        "alwaysApply: true\n"
        "---"
    )
    return f"{frontmatter}\n\n{body}\n"
