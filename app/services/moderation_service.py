from typing import Any, Dict, Mapping, Optional, Protocol

from app.clients.moderation_client import OpenAIModerationClient
from app.core.config import Settings
from app.core.exceptions import (
    ConfigurationException,
    ClassifierException,
    ReportStoreException,
)
from app.core.logger import logger
from app.core.validation import validate_moderation_payload
from app.schemas.moderation import (
    ClassificationResult,
    ModerationRequest,
    ModerationApprovedResponse,
    ModerationReportResponse,
)
from app.services.decision import extract_flagged_categories, get_priority, report_fields_for
from app.services.report_store import ReportStore, build_report_store


class Classifier(Protocol):
    def classify(self, content: str) -> ClassificationResult:
        ...


class ContentModerationHandler:
    """
    Moderates a single piece of user content.

    The sequence is validate -> classify -> (report if flagged) -> respond.
    Each step completes before the next starts; any failure ends the
    request with an exception and nothing after it runs.

    Collaborators may be injected; otherwise they are built from settings
    after the payload has passed validation.
    """

    def __init__(
        self,
        settings: Settings,
        classifier: Optional[Classifier] = None,
        report_store: Optional[ReportStore] = None,
    ):
        self.settings = settings
        self._classifier = classifier
        self._report_store = report_store

    def _ensure_configured(self) -> None:
        missing = self.settings.missing_settings()
        if missing:
            logger.error(
                "Missing required environment variables",
                extra={"missing": missing}
            )
            raise ConfigurationException(missing)

    @property
    def classifier(self) -> Classifier:
        if self._classifier is None:
            self._classifier = OpenAIModerationClient(
                api_key=self.settings.openai_api_key,
                url=self.settings.openai_moderation_url,
                timeout=self.settings.request_timeout
            )
        return self._classifier

    @property
    def report_store(self) -> ReportStore:
        if self._report_store is None:
            self._report_store = build_report_store(self.settings)
        return self._report_store

    def handle(self, payload: Mapping[str, Any]) -> Dict[str, Any]:
        """
        Run the moderation flow for a decoded request body.

        Args:
            payload: Decoded JSON object from the request

        Returns:
            Response body for a 200 reply

        Raises:
            ValidationException: If required fields are missing or invalid
            ConfigurationException: If credentials are not configured
            ClassifierException: If the classifier call fails
            ReportStoreException: If the report cannot be persisted
        """
        request = validate_moderation_payload(payload)
        self._ensure_configured()
        return self.moderate(request)

    def moderate(self, request: ModerationRequest) -> Dict[str, Any]:
        context = {"entity_id": request.entity_id, "entity_type": request.entity_type}

        logger.info(f"[AI Sentinel] Analyzing {request.entity_type} {request.entity_id}", extra=context)

        try:
            result = self.classifier.classify(request.content)
        except ClassifierException as e:
            logger.error(
                "Moderation classifier call failed",
                extra={**context, "error_code": e.error_code, "status_code": e.status_code, "error": e.message}
            )
            raise

        logger.info(f"[AI Sentinel] Flagged: {result.flagged}", extra=context)

        if not result.flagged:
            logger.info("[AI Sentinel] Content approved", extra=context)
            return ModerationApprovedResponse().model_dump()

        flagged_categories = extract_flagged_categories(result.categories)
        priority = get_priority(result.categories)

        if not flagged_categories:
            logger.warning(
                "Classifier flagged content without any true category",
                extra={**context, "category_scores": result.category_scores}
            )

        logger.info(
            f"[AI Sentinel] Creating {priority} priority report for categories: {', '.join(flagged_categories)}",
            extra={**context, "priority": priority}
        )

        try:
            report = self.report_store.create_report(**report_fields_for(request, flagged_categories, priority))
        except ReportStoreException as e:
            logger.error(
                "Failed to create moderation report",
                extra={**context, "priority": priority, "error_code": e.error_code, "error": e.message}
            )
            raise

        logger.info(
            f"Created moderation report {report.id}",
            extra={**context, "priority": priority, "report_id": report.id}
        )

        return ModerationReportResponse(
            report_id=report.id,
            categories=flagged_categories,
            priority=priority,
        ).model_dump()
