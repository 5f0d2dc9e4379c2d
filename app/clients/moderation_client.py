import requests
from typing import Any, Dict

from app.core.exceptions import ClassifierException
from app.core.logger import logger
from app.schemas.moderation import ClassificationResult

OPENAI_MODERATION_URL = "https://api.openai.com/v1/moderations"


class OpenAIModerationClient:
    """Single-shot client for the OpenAI moderation endpoint. No retries."""

    def __init__(self, api_key: str, url: str = OPENAI_MODERATION_URL, timeout: float = 30.0):
        self.api_key = api_key
        self.url = url
        self.timeout = timeout

    def classify(self, content: str) -> ClassificationResult:
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json"
        }
        try:
            response = requests.post(self.url, headers=headers, json={"input": content}, timeout=self.timeout)
        except requests.RequestException as e:
            raise ClassifierException(f"OpenAI API request failed: {str(e)}")

        if not response.ok:
            raise ClassifierException(
                f"OpenAI API error: {response.status_code} - {response.text}",
                status_code=response.status_code,
                body=response.text
            )

        try:
            data = response.json()
        except ValueError:
            raise ClassifierException(
                "OpenAI API returned a non-JSON body",
                status_code=response.status_code,
                body=response.text
            )

        return self._parse_result(data, response)

    def _parse_result(self, data: Any, response: requests.Response) -> ClassificationResult:
        results = data.get("results") if isinstance(data, dict) else None
        if not results:
            raise ClassifierException(
                "OpenAI API response contained no moderation results",
                status_code=response.status_code,
                body=response.text
            )

        # One input text, one result: only the first entry is used
        result: Dict[str, Any] = results[0]
        if not isinstance(result, dict) or "flagged" not in result or not isinstance(result.get("categories"), dict):
            raise ClassifierException(
                "OpenAI API moderation result is missing 'flagged' or 'categories'",
                status_code=response.status_code,
                body=response.text
            )

        # Newer categories may be null; only boolean flags are meaningful
        categories = {name: value for name, value in result["categories"].items() if isinstance(value, bool)}
        scores = {
            name: value for name, value in (result.get("category_scores") or {}).items()
            if isinstance(value, (int, float))
        }

        logger.debug(
            "Moderation scores received",
            extra={"flagged": result["flagged"], "category_scores": scores}
        )

        return ClassificationResult(
            flagged=bool(result["flagged"]),
            categories=categories,
            category_scores=scores
        )
