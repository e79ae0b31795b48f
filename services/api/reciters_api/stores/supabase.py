"""Database gateway client.

The reciters data lives behind Supabase's PostgREST endpoint. Queries go
through postgrest-py's AsyncPostgrestClient; this module only builds one
with the project key and an httpx client that carries the timeout.

Tests pass an httpx transport to serve requests from memory.
"""

import httpx
from postgrest import DEFAULT_POSTGREST_CLIENT_HEADERS, APIError, AsyncPostgrestClient

from reciters_api.settings import Settings


def create_client(
    url: str,
    key: str,
    *,
    schema: str = "public",
    timeout: float = 30.0,
    transport: httpx.AsyncBaseTransport | None = None,
) -> AsyncPostgrestClient:
    """Build a PostgREST client authenticated with the project key.

    Args:
        url: REST base URL, e.g. "https://<project>.supabase.co/rest/v1".
        key: Anon or service-role key, sent as `apikey` and bearer token.
        schema: Database schema exposed by the gateway.
        timeout: Per-request timeout in seconds.
        transport: Optional httpx transport (tests use MockTransport).
    """
    headers = {**DEFAULT_POSTGREST_CLIENT_HEADERS, "apikey": key}
    if key:
        headers["Authorization"] = f"Bearer {key}"

    http_client = httpx.AsyncClient(
        timeout=timeout,
        transport=transport,
        follow_redirects=True,
    )
    return AsyncPostgrestClient(url, schema=schema, headers=headers, http_client=http_client)


def client_from_settings(settings: Settings) -> AsyncPostgrestClient:
    return create_client(
        settings.rest_url,
        settings.supabase_key,
        schema=settings.supabase_schema,
        timeout=settings.supabase_timeout,
    )


def describe_error(error: Exception) -> str:
    """Readable one-liner for a failed query (APIError has an empty str())."""
    if isinstance(error, APIError):
        parts = [error.message or "request failed"]
        if error.code:
            parts.append(f"code={error.code}")
        if error.details:
            parts.append(f"details={error.details}")
        return " ".join(str(p) for p in parts)
    return str(error) or type(error).__name__
