from memory_bank import analyze, build_template, extract_schema, search
from memory_bank.rules import DEFAULT_RULES


if __name__ == "__main__":
    corpus = {
        "techContext": "# Tech Context\n\n## Technologies\n\nWe deploy with Docker on Fly.io.",
        "progress": "# Progress\n\n> Last Updated: 2025-01-01\n\n## Completed Work\n\nBeta shipped.",
    }
    hits = search("docker deploy", corpus)
    reports = analyze(DEFAULT_RULES, corpus)
    template = build_template(extract_schema(DEFAULT_RULES, "progress"), "progress")
    print(
        {
            "hits": len(hits),
            "reports": [(r.document_type, r.status) for r in reports],
            "template_lines": len(template.splitlines()),
        }
    )
