"""Fetch collection schemas from Fauna over its HTTP query API."""

from __future__ import annotations

import json
from typing import Any, Final

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from .errors import FaunaQueryError
from .records import RecordSchema
from .schema_loader import records_from_schema

DEFAULT_ENDPOINT: Final[str] = "https://db.fauna.com"
QUERY_PATH: Final[str] = "/query/1"
ALL_COLLECTIONS_QUERY: Final[str] = "Collection.all()"

# Responses worth retrying
RETRY_STATUSES: Final[tuple[int, ...]] = (429, 500, 502, 503, 504)


def create_session(retries: int = 3, backoff_factor: float = 0.5) -> requests.Session:
    """Create a requests session that retries transient failures."""
    session = requests.Session()
    retry = Retry(
        total=retries,
        backoff_factor=backoff_factor,
        status_forcelist=RETRY_STATUSES,
        allowed_methods=None,
    )
    adapter = HTTPAdapter(max_retries=retry)
    session.mount("http://", adapter)
    session.mount("https://", adapter)
    return session


def _paginate_query(cursor: str) -> str:
    return f"Set.paginate({json.dumps(cursor)})"


def run_query(
    session: requests.Session,
    secret: str,
    fql: str,
    endpoint: str = DEFAULT_ENDPOINT,
    timeout: float = 10.0,
) -> Any:
    """Run a single FQL query and return its ``data`` payload.

    Raises:
        FaunaQueryError: On transport errors, non-2xx responses or
            error bodies returned by Fauna.
    """
    try:
        resp = session.post(
            endpoint.rstrip("/") + QUERY_PATH,
            json={"query": fql},
            headers={
                "Authorization": f"Bearer {secret}",
                "X-Format": "simple",
            },
            timeout=timeout,
        )
    except requests.RequestException as e:
        raise FaunaQueryError(str(e)) from e

    try:
        body = resp.json()
    except ValueError as e:
        raise FaunaQueryError("response is not valid JSON", status=resp.status_code) from e

    error = body.get("error") if isinstance(body, dict) else None
    if not resp.ok or error:
        code = error.get("code") if isinstance(error, dict) else None
        message = error.get("message") if isinstance(error, dict) else resp.reason
        raise FaunaQueryError(str(message or "unknown error"), status=resp.status_code, code=code)

    if not isinstance(body, dict) or "data" not in body:
        raise FaunaQueryError("response has no 'data'", status=resp.status_code)

    return body["data"]


def fetch_collections(
    secret: str,
    endpoint: str = DEFAULT_ENDPOINT,
    session: requests.Session | None = None,
    timeout: float = 10.0,
) -> list[RecordSchema]:
    """Fetch every collection definition via ``Collection.all()``.

    Follows ``after`` cursors until the set is exhausted and returns the
    records in the order Fauna lists them.
    """
    session = session or create_session()
    collections: list[dict[str, Any]] = []

    page = run_query(session, secret, ALL_COLLECTIONS_QUERY, endpoint, timeout)
    while True:
        if not isinstance(page, dict):
            raise FaunaQueryError("unexpected page shape")
        collections.extend(page.get("data") or [])
        cursor = page.get("after")
        if not cursor:
            break
        page = run_query(session, secret, _paginate_query(cursor), endpoint, timeout)

    return records_from_schema({"collections": collections}, endpoint)
