"""
Statistics text and JSON payload for a CircularReferenceResult.
The detailed report lives on the result itself.
"""
from collections import Counter
from datetime import datetime
from typing import Any, Dict

from .models import CircularReferenceResult


def render_statistics(result: CircularReferenceResult) -> str:
    lines = [
        "=== Circular Reference Statistics ===",
        "",
        f"Total Circular Paths: {len(result.circular_paths)}",
        f"Total Warnings: {len(result.warnings)}",
        "",
    ]

    if result.circular_paths:
        # Counter keeps first-seen order, so types appear in detector order
        by_type = Counter(path.type.value for path in result.circular_paths)
        lines.extend(f"{ref_type}: {count}" for ref_type, count in by_type.items())
        lines.append("")

    lines.append(f"Status: {'Action Required' if result.has_circular_references else 'Healthy'}")
    return "\n".join(lines) + "\n"


def build_payload(result: CircularReferenceResult) -> Dict[str, Any]:
    """JSON-ready dict of a result, paths annotated with their derived fields."""
    return {
        "report_type": "CIRCULAR_REFERENCE_REPORT",
        "generated_at": datetime.now().isoformat(),
        "summary": result.summary,
        "has_circular_references": result.has_circular_references,
        "circular_paths": [
            {
                **path.model_dump(mode="json"),
                "path_description": path.path_description,
                "cycle_length": path.cycle_length,
            }
            for path in result.circular_paths
        ],
        "warnings": list(result.warnings),
    }
