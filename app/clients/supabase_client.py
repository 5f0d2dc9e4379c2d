import requests
from typing import Any, Dict, List


class SupabaseRestError(Exception):
    def __init__(self, message: str, status_code: int | None = None, body: str | None = None):
        self.status_code = status_code
        self.body = body
        super().__init__(message)


class SupabaseRestClient:
    """
    Minimal PostgREST client for a Supabase project.

    Authenticates with the service-role key, so row level security
    policies do not apply to its writes.
    """

    def __init__(self, url: str, service_role_key: str, timeout: float = 30.0):
        self.base_url = url.rstrip("/")
        self.service_role_key = service_role_key
        self.timeout = timeout

    def _headers(self) -> Dict[str, str]:
        return {
            "apikey": self.service_role_key,
            "Authorization": f"Bearer {self.service_role_key}",
            "Content-Type": "application/json",
            "Prefer": "return=representation"
        }

    def insert(self, table: str, rows: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        """Insert rows into a table and return the created records."""
        url = f"{self.base_url}/rest/v1/{table}"
        try:
            response = requests.post(url, headers=self._headers(), json=rows, timeout=self.timeout)
        except requests.RequestException as e:
            raise SupabaseRestError(f"Supabase request failed: {str(e)}")

        if not response.ok:
            message = response.text
            try:
                error_body = response.json()
            except ValueError:
                error_body = None
            if isinstance(error_body, dict) and error_body.get("message"):
                message = error_body["message"]
            raise SupabaseRestError(
                f"Database error: {message}",
                status_code=response.status_code,
                body=response.text
            )

        try:
            return response.json()
        except ValueError:
            raise SupabaseRestError(
                "Database error: insert returned a non-JSON body",
                status_code=response.status_code,
                body=response.text
            )
