import logging
from typing import Any, Optional

import httpx

from todoapp.client.errors import BackendError

logger = logging.getLogger(__name__)


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text or response.reason_phrase
    detail = body.get("detail") if isinstance(body, dict) else None
    if isinstance(detail, str):
        return detail
    if isinstance(detail, list):
        # FastAPI validation errors: [{"loc": [...], "msg": "..."}, ...]
        msgs = [d.get("msg", "") for d in detail if isinstance(d, dict)]
        return "; ".join(m for m in msgs if m) or "Invalid request"
    return response.reason_phrase or f"HTTP {response.status_code}"


async def send(http: httpx.AsyncClient, method: str, path: str, token: Optional[str] = None, **kwargs) -> Any:
    """Perform one request against the backend and return the decoded JSON body.

    Raises BackendError for transport failures and non-2xx responses.
    """
    headers = kwargs.pop("headers", {})
    if token:
        headers["Authorization"] = f"Bearer {token}"
    try:
        response = await http.request(method, path, headers=headers, **kwargs)
    except httpx.HTTPError as exc:
        logger.warning("%s %s failed: %s", method, path, exc)
        raise BackendError(str(exc) or "Network error") from exc
    if response.is_error:
        raise BackendError(_error_message(response), response.status_code)
    if not response.content:
        return None
    return response.json()
