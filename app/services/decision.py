"""
Decision rules that turn classifier category flags into a report priority and reason.
"""

from typing import Dict, List, Sequence, Any

from app.schemas.moderation import ModerationRequest

CRITICAL_CATEGORIES = frozenset({
    "violence",
    "violence/graphic",
    "self-harm",
    "self-harm/intent",
    "self-harm/instructions",
})

REASON_PREFIX = "AI Detection: "
UNSPECIFIED_VIOLATION = "Unspecified violation"


def extract_flagged_categories(categories: Dict[str, bool]) -> List[str]:
    """Category names whose flag is true, in the classifier's key order."""
    return [category for category, flagged in categories.items() if flagged]


def get_priority(categories: Dict[str, bool]) -> str:
    """
    Determine report priority from category flags.

    Violence and self-harm categories are critical; anything else,
    including a flagged result with no true category, is high.
    """
    if any(categories.get(category) for category in CRITICAL_CATEGORIES):
        return "critical"
    return "high"


def format_reason(flagged_categories: Sequence[str]) -> str:
    if not flagged_categories:
        return REASON_PREFIX + UNSPECIFIED_VIOLATION
    return REASON_PREFIX + ", ".join(flagged_categories)


def format_description(entity_type: str, flagged_categories: Sequence[str]) -> str:
    # An empty category list leaves the trailing "for: " as is
    return f"Automatic AI moderation flagged this {entity_type} for: {', '.join(flagged_categories)}"


def build_report_row(
    community_id: str,
    accused_id: str,
    entity_id: str,
    entity_type: str,
    reason: str,
    description: str,
    priority: str,
) -> Dict[str, Any]:
    """
    Build the report record for a flagged entity.

    Exactly one of post_id / comment_id is set, chosen by entity_type.
    reporter_id is None to mark the report as system generated.
    """
    if entity_type not in ("post", "comment"):
        raise ValueError(f"Unsupported entity_type: {entity_type}")

    return {
        "community_id": community_id,
        "reporter_id": None,
        "accused_id": accused_id,
        "post_id": entity_id if entity_type == "post" else None,
        "comment_id": entity_id if entity_type == "comment" else None,
        "reason": reason,
        "description": description,
        "priority": priority,
        "status": "pending",
    }


def report_fields_for(request: ModerationRequest, flagged_categories: Sequence[str], priority: str) -> Dict[str, str]:
    """Keyword arguments for ReportStore.create_report derived from a flagged request."""
    return {
        "community_id": request.community_id,
        "accused_id": request.author_id,
        "entity_id": request.entity_id,
        "entity_type": request.entity_type,
        "reason": format_reason(flagged_categories),
        "description": format_description(request.entity_type, flagged_categories),
        "priority": priority,
    }
