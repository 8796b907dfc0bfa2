"""
Hosted backend client

Thin async facade over the hosted REST tables, remote procedures and auth
service. Every call returns a ``Result(data, error)`` pair; a non-null
``error`` means the call failed and ``data`` must be ignored. Nothing here
retries, and no call is grouped with another into a transaction.
"""
from __future__ import annotations

import enum
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, AsyncIterator, Dict, List, NamedTuple, Optional, Sequence, Tuple, Union

import httpx
from fastapi import Request

from clerkdesk.core.config import settings
from clerkdesk.core.logger import logger
from clerkdesk.core.session import read_hosted_cookie

# Characters that force quoting inside an in.(...) list
_LIST_RESERVED = set(',()".: ')


@dataclass
class BackendError:
    message: str
    code: Optional[str] = None
    status: Optional[int] = None
    details: Optional[str] = None

    @classmethod
    def from_response(cls, resp: httpx.Response) -> "BackendError":
        """Build from a REST (message/code/details) or auth (msg/error_description) error body."""
        try:
            body = resp.json()
        except ValueError:
            body = None

        message = code = details = None
        if isinstance(body, dict):
            message = (
                body.get("message")
                or body.get("msg")
                or body.get("error_description")
                or body.get("error")
            )
            code = body.get("code") or body.get("error_code") or body.get("error")
            details = body.get("details") or body.get("hint")

        return cls(
            message=str(message or resp.text[:200] or resp.reason_phrase or "Request failed"),
            code=str(code) if code is not None else None,
            status=resp.status_code,
            details=str(details) if details is not None else None,
        )

    @classmethod
    def from_exception(cls, exc: Exception) -> "BackendError":
        return cls(message=str(exc) or exc.__class__.__name__, code="network_error")


class Result(NamedTuple):
    data: Any
    error: Optional[BackendError]


def _format_value(value: Any) -> str:
    if isinstance(value, enum.Enum):
        value = value.value
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    return str(value)


def _format_list(values: Sequence[Any]) -> str:
    items = []
    for value in values:
        text = _format_value(value)
        if any(ch in _LIST_RESERVED for ch in text):
            text = '"' + text.replace('"', '\\"') + '"'
        items.append(text)
    return "(" + ",".join(items) + ")"


def _parse_count(content_range: Optional[str]) -> int:
    # "0-24/25", "*/0" or "*/*"
    if not content_range or "/" not in content_range:
        return 0
    total = content_range.rsplit("/", 1)[1].strip()
    return int(total) if total.isdigit() else 0


def _json_or_none(resp: httpx.Response) -> Any:
    if not resp.content:
        return None
    try:
        return resp.json()
    except ValueError:
        return None


class TableQuery:
    """Fluent builder for one request against a hosted row collection."""

    def __init__(self, backend: "HostedBackend", table: str) -> None:
        self._backend = backend
        self._table = table
        self._method = "GET"
        self._columns = "*"
        self._count: Optional[str] = None
        self._head = False
        self._body: Optional[Union[List[Dict[str, Any]], Dict[str, Any]]] = None
        self._returning = False
        self._filters: List[Tuple[str, str]] = []
        self._order: List[str] = []
        self._limit: Optional[int] = None
        self._single = False

    # -- operations --------------------------------------------------------

    def select(self, columns: str = "*", *, count: Optional[str] = None, head: bool = False) -> "TableQuery":
        self._method = "HEAD" if head else "GET"
        self._columns = columns
        self._count = count
        self._head = head
        return self

    def insert(self, rows: Union[Dict[str, Any], List[Dict[str, Any]]], *, returning: bool = True) -> "TableQuery":
        self._method = "POST"
        self._body = rows if isinstance(rows, list) else [rows]
        self._returning = returning
        return self

    def update(self, values: Dict[str, Any], *, returning: bool = True) -> "TableQuery":
        self._method = "PATCH"
        self._body = values
        self._returning = returning
        return self

    def delete(self, *, returning: bool = False) -> "TableQuery":
        self._method = "DELETE"
        self._returning = returning
        return self

    # -- filters -----------------------------------------------------------

    def _filter(self, column: str, op: str, value: Any) -> "TableQuery":
        self._filters.append((column, f"{op}.{_format_value(value)}"))
        return self

    def eq(self, column: str, value: Any) -> "TableQuery":
        if value is None:
            return self._filter(column, "is", None)
        return self._filter(column, "eq", value)

    def neq(self, column: str, value: Any) -> "TableQuery":
        return self._filter(column, "neq", value)

    def gt(self, column: str, value: Any) -> "TableQuery":
        return self._filter(column, "gt", value)

    def gte(self, column: str, value: Any) -> "TableQuery":
        return self._filter(column, "gte", value)

    def lt(self, column: str, value: Any) -> "TableQuery":
        return self._filter(column, "lt", value)

    def lte(self, column: str, value: Any) -> "TableQuery":
        return self._filter(column, "lte", value)

    def in_(self, column: str, values: Sequence[Any]) -> "TableQuery":
        self._filters.append((column, f"in.{_format_list(values)}"))
        return self

    def not_in(self, column: str, values: Sequence[Any]) -> "TableQuery":
        self._filters.append((column, f"not.in.{_format_list(values)}"))
        return self

    # -- modifiers ---------------------------------------------------------

    def order(self, column: str, *, desc: bool = False, nulls_first: Optional[bool] = None) -> "TableQuery":
        term = f"{column}.{'desc' if desc else 'asc'}"
        if nulls_first is not None:
            term += ".nullsfirst" if nulls_first else ".nullslast"
        self._order.append(term)
        return self

    def limit(self, count: int) -> "TableQuery":
        self._limit = count
        return self

    def single(self) -> "TableQuery":
        self._single = True
        return self

    # -- execution ---------------------------------------------------------

    def _params(self) -> List[Tuple[str, str]]:
        params: List[Tuple[str, str]] = []
        if self._method in ("GET", "HEAD") or self._returning:
            params.append(("select", self._columns))
        params.extend(self._filters)
        if self._order:
            params.append(("order", ",".join(self._order)))
        if self._limit is not None:
            params.append(("limit", str(self._limit)))
        return params

    def _headers(self) -> Dict[str, str]:
        prefer = []
        if self._method in ("POST", "PATCH", "DELETE"):
            prefer.append("return=representation" if self._returning else "return=minimal")
        if self._count:
            prefer.append(f"count={self._count}")
        return {"Prefer": ",".join(prefer)} if prefer else {}

    async def execute(self) -> Result:
        path = f"/rest/v1/{self._table}"
        try:
            resp = await self._backend.http.request(
                self._method,
                path,
                params=self._params(),
                json=self._body,
                headers=self._headers(),
            )
        except httpx.HTTPError as exc:
            logger.error("Hosted %s %s failed: %s", self._method, self._table, exc)
            return Result(None, BackendError.from_exception(exc))

        if resp.status_code >= 400:
            return Result(None, BackendError.from_response(resp))

        if self._head:
            return Result(_parse_count(resp.headers.get("content-range")), None)

        data = _json_or_none(resp)
        if self._single:
            rows = data if isinstance(data, list) else ([data] if data is not None else [])
            if len(rows) != 1:
                return Result(None, BackendError(
                    message="JSON object requested, multiple (or no) rows returned",
                    code="PGRST116",
                    status=406,
                ))
            data = rows[0]
        return Result(data, None)


class HostedAuth:
    """Hosted identity service: password sign-in, sign-up, sign-out, current user."""

    def __init__(self, backend: "HostedBackend") -> None:
        self._backend = backend

    async def _call(
        self,
        method: str,
        path: str,
        *,
        json: Optional[Dict[str, Any]] = None,
        params: Optional[Dict[str, str]] = None,
        access_token: Optional[str] = None,
    ) -> Result:
        headers = {"Authorization": f"Bearer {access_token}"} if access_token else None
        try:
            resp = await self._backend.http.request(method, path, json=json, params=params, headers=headers)
        except httpx.HTTPError as exc:
            logger.error("Hosted auth %s failed: %s", path, exc)
            return Result(None, BackendError.from_exception(exc))
        if resp.status_code >= 400:
            return Result(None, BackendError.from_response(resp))
        return Result(_json_or_none(resp), None)

    async def sign_in_with_password(self, email: str, password: str) -> Result:
        return await self._call(
            "POST",
            "/auth/v1/token",
            params={"grant_type": "password"},
            json={"email": email, "password": password},
        )

    async def sign_up(self, email: str, password: str, data: Optional[Dict[str, Any]] = None) -> Result:
        payload: Dict[str, Any] = {"email": email, "password": password}
        if data:
            payload["data"] = data
        return await self._call("POST", "/auth/v1/signup", json=payload)

    async def sign_out(self, access_token: str) -> Result:
        return await self._call("POST", "/auth/v1/logout", access_token=access_token)

    async def get_user(self, access_token: str) -> Result:
        return await self._call("GET", "/auth/v1/user", access_token=access_token)

    async def health(self) -> Result:
        return await self._call("GET", "/auth/v1/health")


class HostedBackend:
    """
    One client per request. The caller's hosted access token, when present,
    is forwarded so the backend's row-level policies apply.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        api_key: Optional[str] = None,
        *,
        access_token: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        base_url = (base_url or settings.HOSTED_URL).rstrip("/")
        api_key = settings.HOSTED_ANON_KEY if api_key is None else api_key
        if timeout is None:
            timeout = settings.HOSTED_TIMEOUT_SECONDS

        headers = {"apikey": api_key}
        bearer = access_token or api_key
        if bearer:
            headers["Authorization"] = f"Bearer {bearer}"

        client_kwargs: Dict[str, Any] = {"base_url": base_url, "headers": headers}
        if timeout is not None:
            client_kwargs["timeout"] = timeout
        if transport is not None:
            client_kwargs["transport"] = transport

        self.http = httpx.AsyncClient(**client_kwargs)
        self.auth = HostedAuth(self)

    def table(self, name: Union[str, enum.Enum]) -> TableQuery:
        return TableQuery(self, getattr(name, "value", name))

    async def rpc(self, name: Union[str, enum.Enum], params: Optional[Dict[str, Any]] = None) -> Result:
        fn = getattr(name, "value", name)
        try:
            resp = await self.http.post(f"/rest/v1/rpc/{fn}", json=params or {})
        except httpx.HTTPError as exc:
            logger.error("Hosted rpc %s failed: %s", fn, exc)
            return Result(None, BackendError.from_exception(exc))
        if resp.status_code >= 400:
            return Result(None, BackendError.from_response(resp))
        return Result(_json_or_none(resp), None)

    async def aclose(self) -> None:
        await self.http.aclose()

    async def __aenter__(self) -> "HostedBackend":
        return self

    async def __aexit__(self, *_exc: object) -> None:
        await self.aclose()


async def get_backend(request: Request) -> AsyncIterator[HostedBackend]:
    """FastAPI dependency: a hosted backend client scoped to the request."""
    hosted = read_hosted_cookie(request)
    backend = HostedBackend(access_token=hosted.access_token if hosted else None)
    try:
        yield backend
    finally:
        await backend.aclose()
