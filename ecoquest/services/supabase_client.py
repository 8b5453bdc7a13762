import logging
from typing import Any, Iterable, Sequence, Tuple

import httpx
from fastapi import HTTPException

from ..settings import settings

logger = logging.getLogger(__name__)

Params = Sequence[Tuple[str, str]]

NO_ROWS_CODE = "PGRST116"


def eq(value: Any) -> str:
    return f"eq.{value}"


def gte(value: Any) -> str:
    return f"gte.{value}"


def lte(value: Any) -> str:
    return f"lte.{value}"


class SupabaseClient:
    """Minimal async client for Supabase PostgREST and Auth endpoints.

    Requests are sent with the project's anon key; once bound to a session
    (``for_session``) they also carry the user's access token so that
    row-level security policies apply.
    """

    def __init__(
        self,
        url: str,
        api_key: str,
        access_token: str | None = None,
        timeout: float = 10.0,
    ) -> None:
        self.url = url.rstrip("/")
        self.api_key = api_key
        self.access_token = access_token
        self.timeout = timeout

    @classmethod
    def from_settings(cls) -> "SupabaseClient":
        if not settings.supabase_url or not settings.supabase_anon_key:
            raise HTTPException(status_code=500, detail="Supabase is not configured")
        return cls(
            url=settings.supabase_url,
            api_key=settings.supabase_anon_key,
            timeout=settings.supabase_timeout,
        )

    def with_token(self, access_token: str) -> "SupabaseClient":
        return SupabaseClient(
            url=self.url,
            api_key=self.api_key,
            access_token=access_token,
            timeout=self.timeout,
        )

    def for_session(self, session: Any) -> "SupabaseClient":
        return self.with_token(session.access_token)

    def _headers(self, extra: dict[str, str] | None = None) -> dict[str, str]:
        headers = {
            "apikey": self.api_key,
            "Authorization": f"Bearer {self.access_token or self.api_key}",
        }
        if extra:
            headers.update(extra)
        return headers

    @staticmethod
    def _error_body(response: httpx.Response) -> dict:
        try:
            body = response.json()
        except ValueError:
            return {}
        return body if isinstance(body, dict) else {}

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: Params | None = None,
        json: Any = None,
        headers: dict[str, str] | None = None,
    ) -> httpx.Response:
        try:
            async with httpx.AsyncClient(base_url=self.url, timeout=self.timeout) as client:
                response = await client.request(
                    method,
                    path,
                    params=list(params or []),
                    json=json,
                    headers=self._headers(headers),
                )
        except httpx.HTTPError as exc:
            logger.exception("Supabase request failed: %s %s", method, path)
            raise HTTPException(status_code=502, detail="Failed to contact Supabase") from exc

        if response.status_code in (401, 403):
            logger.warning("Supabase rejected credentials: %s %s -> %s", method, path, response.status_code)
            raise HTTPException(status_code=401, detail="Invalid or expired session")
        return response

    def _raise_for_status(self, response: httpx.Response, method: str, path: str) -> None:
        if response.status_code < 400:
            return
        body = self._error_body(response)
        logger.error(
            "Supabase error %s on %s %s: %s",
            response.status_code,
            method,
            path,
            body.get("message") or response.text,
        )
        raise HTTPException(status_code=502, detail="Supabase request failed")

    async def select(
        self,
        table: str,
        columns: str = "*",
        filters: Iterable[Tuple[str, str]] = (),
        order: str | None = None,
        limit: int | None = None,
    ) -> list[dict]:
        path = f"/rest/v1/{table}"
        params = [("select", columns), *filters]
        if order:
            params.append(("order", order))
        if limit is not None:
            params.append(("limit", str(limit)))
        response = await self._request("GET", path, params=params)
        self._raise_for_status(response, "GET", path)
        return response.json()

    async def select_one(
        self,
        table: str,
        columns: str = "*",
        filters: Iterable[Tuple[str, str]] = (),
    ) -> dict | None:
        """Fetch exactly one row, or ``None`` when no row matches."""
        path = f"/rest/v1/{table}"
        params = [("select", columns), *filters]
        response = await self._request(
            "GET",
            path,
            params=params,
            headers={"Accept": "application/vnd.pgrst.object+json"},
        )
        if response.status_code == 406 and self._error_body(response).get("code") == NO_ROWS_CODE:
            return None
        self._raise_for_status(response, "GET", path)
        return response.json()

    async def insert(self, table: str, rows: dict | list[dict]) -> list[dict]:
        path = f"/rest/v1/{table}"
        response = await self._request(
            "POST", path, json=rows, headers={"Prefer": "return=representation"}
        )
        self._raise_for_status(response, "POST", path)
        return response.json()

    async def upsert(self, table: str, rows: dict | list[dict], on_conflict: str) -> list[dict]:
        path = f"/rest/v1/{table}"
        response = await self._request(
            "POST",
            path,
            params=[("on_conflict", on_conflict)],
            json=rows,
            headers={"Prefer": "resolution=merge-duplicates,return=representation"},
        )
        self._raise_for_status(response, "POST", path)
        return response.json()

    async def delete(self, table: str, filters: Iterable[Tuple[str, str]]) -> list[dict]:
        path = f"/rest/v1/{table}"
        response = await self._request(
            "DELETE",
            path,
            params=list(filters),
            headers={"Prefer": "return=representation"},
        )
        self._raise_for_status(response, "DELETE", path)
        return response.json()

    async def rpc(self, function: str, args: dict) -> Any:
        path = f"/rest/v1/rpc/{function}"
        response = await self._request("POST", path, json=args)
        self._raise_for_status(response, "POST", path)
        if not response.content:
            return None
        return response.json()

    async def get_user(self, access_token: str) -> dict:
        path = "/auth/v1/user"
        response = await self.with_token(access_token)._request("GET", path)
        self._raise_for_status(response, "GET", path)
        return response.json()


def get_supabase() -> SupabaseClient:
    return SupabaseClient.from_settings()
