from datetime import datetime
from typing import Optional, Literal, Dict, List

from pydantic import BaseModel


EntityType = Literal["post", "comment"]
Priority = Literal["critical", "high"]


# ---- Requests ----
class ModerationRequest(BaseModel):
    content: str
    author_id: str
    entity_id: str
    entity_type: EntityType
    community_id: str

    class Config:
        frozen = True
        coerce_numbers_to_str = True


# ---- Classifier ----
class ClassificationResult(BaseModel):
    flagged: bool
    categories: Dict[str, bool]
    category_scores: Dict[str, float] = {}


# ---- Reports ----
class Report(BaseModel):
    id: str
    community_id: str
    reporter_id: Optional[str] = None  # None = System/AI report
    accused_id: str
    post_id: Optional[str] = None
    comment_id: Optional[str] = None
    reason: str
    description: Optional[str] = None
    priority: Priority
    status: str = "pending"
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
        coerce_numbers_to_str = True


# ---- Responses ----
class ModerationApprovedResponse(BaseModel):
    flagged: Literal[False] = False
    action: Literal["approved"] = "approved"
    message: str = "Content passed moderation"


class ModerationReportResponse(BaseModel):
    flagged: Literal[True] = True
    action: Literal["report_created"] = "report_created"
    report_id: str
    categories: List[str]
    priority: Priority
