"""
Input validation for inbound moderation payloads.
"""

from typing import Any, Mapping, List

from pydantic import ValidationError

from app.core.exceptions import ValidationException
from app.schemas.moderation import ModerationRequest

REQUIRED_FIELDS = (
    "content",
    "author_id",
    "entity_id",
    "entity_type",
    "community_id",
)
ENTITY_TYPES = ("post", "comment")

INVALID_ENTITY_TYPE_MESSAGE = "Invalid entity_type. Must be 'post' or 'comment'"


def find_missing_fields(payload: Mapping[str, Any]) -> List[str]:
    """Return every required field absent from the payload, in declaration order."""
    return [field for field in REQUIRED_FIELDS if field not in payload]


def validate_moderation_payload(payload: Mapping[str, Any]) -> ModerationRequest:
    """
    Validate a decoded request body and build a ModerationRequest.

    Args:
        payload: Decoded JSON object from the request body

    Returns:
        Parsed, immutable moderation request

    Raises:
        ValidationException: If fields are missing, entity_type is unknown,
            or a field value cannot be used as text
    """
    missing = find_missing_fields(payload)
    if missing:
        raise ValidationException("Missing required fields", missing=missing)

    if payload["entity_type"] not in ENTITY_TYPES:
        raise ValidationException(INVALID_ENTITY_TYPE_MESSAGE)

    try:
        return ModerationRequest(**{field: payload[field] for field in REQUIRED_FIELDS})
    except ValidationError as e:
        invalid = sorted(
            {str(error["loc"][0]) for error in e.errors() if error.get("loc")},
            key=REQUIRED_FIELDS.index,
        )
        raise ValidationException("Invalid field types", invalid=invalid)
