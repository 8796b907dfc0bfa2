import json
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Tuple

import httpx
import jwt
import pytest
from fastapi import Request
from fastapi.testclient import TestClient

from clerkdesk.core.session import read_hosted_cookie
from clerkdesk.db.backend import HostedBackend, get_backend
from clerkdesk.main import app

HOSTED_URL = "http://hosted.test"
ANON_KEY = "anon-key"


def make_token(sub: str = "hosted-user", email: str = "clerk@example.com", expires_in: int = 3600) -> str:
    claims = {"sub": sub, "email": email, "exp": int(time.time()) + expires_in}
    return jwt.encode(claims, "unit-test-signing-key-0123456789abcdef", algorithm="HS256")


@dataclass
class Call:
    method: str
    path: str
    params: List[Tuple[str, str]]
    body: Any
    headers: Dict[str, str]

    def param(self, name: str) -> Optional[str]:
        for key, value in self.params:
            if key == name:
                return value
        return None


def _split_list(raw: str) -> List[str]:
    # "(a,"b c",d)" -> ["a", "b c", "d"]
    items, current, quoted = [], "", False
    for ch in raw.strip()[1:-1]:
        if ch == '"':
            quoted = not quoted
        elif ch == "," and not quoted:
            items.append(current)
            current = ""
        else:
            current += ch
    items.append(current)
    return items


def _matches(row: Dict[str, Any], column: str, expr: str) -> bool:
    value = row.get(column)
    negate = expr.startswith("not.")
    if negate:
        expr = expr[4:]
    op, _, operand = expr.partition(".")

    if op == "is":
        result = value is None if operand == "null" else str(value).lower() == operand
    elif op == "in":
        result = value is not None and str(value) in _split_list(operand)
    elif value is None:
        result = False
    elif op == "eq":
        result = str(value) == operand
    elif op == "neq":
        result = str(value) != operand
    elif op == "gt":
        result = str(value) > operand
    elif op == "gte":
        result = str(value) >= operand
    elif op == "lt":
        result = str(value) < operand
    elif op == "lte":
        result = str(value) <= operand
    else:
        raise AssertionError(f"unsupported filter {op}")
    return not result if negate else result


def _sort(rows: List[Dict[str, Any]], order: str) -> List[Dict[str, Any]]:
    for term in reversed(order.split(",")):
        column, direction, *rest = term.split(".")
        desc = direction == "desc"
        nulls_first = rest[0] == "nullsfirst" if rest else desc
        present = sorted((r for r in rows if r.get(column) is not None), key=lambda r: r[column], reverse=desc)
        missing = [r for r in rows if r.get(column) is None]
        rows = missing + present if nulls_first else present + missing
    return rows


class FakeHostedService:
    """
    In-memory stand-in for the hosted REST, RPC and auth endpoints.
    Every request is recorded in ``calls``.
    """

    def __init__(self):
        self.tables: Dict[str, List[Dict[str, Any]]] = {}
        self.rpc_results: Dict[str, Any] = {}
        self.rpc_failures: Dict[str, Tuple[int, Dict[str, Any]]] = {}
        self.failures: Dict[Tuple[str, str], Tuple[int, Dict[str, Any]]] = {}
        self.passwords: Dict[str, str] = {}
        self.valid_tokens: Dict[str, Dict[str, Any]] = {}
        self.signup_failure: Optional[Tuple[int, Dict[str, Any]]] = None
        self.calls: List[Call] = []
        self._next_id = 1000

    # -- setup -------------------------------------------------------------

    def seed(self, table: str, rows: List[Dict[str, Any]]) -> None:
        self.tables[table] = [dict(row) for row in rows]

    def fail(self, table: str, method: str = "*", status: int = 500, message: str = "boom") -> None:
        self.failures[(table, method)] = (status, {"message": message, "code": "XX000"})

    def fail_rpc(self, name: str, status: int = 500, message: str = "rpc failed") -> None:
        self.rpc_failures[name] = (status, {"message": message, "code": "P0001"})

    def sign_in_token(self, email: str = "clerk@example.com", sub: str = "hosted-user", expires_in: int = 3600) -> str:
        token = make_token(sub, email, expires_in)
        self.valid_tokens[token] = {"id": sub, "email": email}
        return token

    # -- inspection --------------------------------------------------------

    def table_calls(self, table: str, method: Optional[str] = None) -> List[Call]:
        return [
            c for c in self.calls
            if c.path == f"/rest/v1/{table}" and (method is None or c.method == method)
        ]

    def writes(self) -> List[Call]:
        return [
            c for c in self.calls
            if c.method in ("POST", "PATCH", "DELETE") and not c.path.startswith("/auth/")
        ]

    def rpc_calls(self, name: str) -> List[Call]:
        return [c for c in self.calls if c.path == f"/rest/v1/rpc/{name}"]

    # -- transport ---------------------------------------------------------

    def handler(self, request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content) if request.content else None
        path = request.url.path
        call = Call(request.method, path, list(request.url.params.multi_items()), body, dict(request.headers))
        self.calls.append(call)

        if path.startswith("/rest/v1/rpc/"):
            return self._rpc(path.rsplit("/", 1)[1], body or {})
        if path.startswith("/rest/v1/"):
            return self._table(path.rsplit("/", 1)[1], call, request.headers.get("prefer", ""))
        if path.startswith("/auth/v1/"):
            return self._auth(path[len("/auth/v1/"):], call)
        return httpx.Response(404, json={"message": "not found"})

    def _rpc(self, name: str, params: Dict[str, Any]) -> httpx.Response:
        if name in self.rpc_failures:
            status, payload = self.rpc_failures[name]
            return httpx.Response(status, json=payload)
        if name not in self.rpc_results:
            return httpx.Response(404, json={"message": f"function {name} does not exist", "code": "PGRST202"})
        result = self.rpc_results[name]
        if callable(result):
            result = result(params)
        return httpx.Response(200, json=result)

    def _filtered(self, rows: List[Dict[str, Any]], call: Call) -> List[Dict[str, Any]]:
        reserved = {"select", "order", "limit"}
        for column, expr in call.params:
            if column not in reserved:
                rows = [r for r in rows if _matches(r, column, expr)]
        return rows

    def _table(self, table: str, call: Call, prefer: str) -> httpx.Response:
        for key in ((table, call.method), (table, "*")):
            if key in self.failures:
                status, payload = self.failures[key]
                return httpx.Response(status, json=payload)

        rows = self.tables.setdefault(table, [])
        representation = "return=representation" in prefer

        if call.method in ("GET", "HEAD"):
            result = self._filtered(list(rows), call)
            if call.param("order"):
                result = _sort(result, call.param("order"))
            if call.param("limit"):
                result = result[: int(call.param("limit"))]
            columns = call.param("select") or "*"
            if columns != "*":
                wanted = columns.split(",")
                result = [{k: r.get(k) for k in wanted} for r in result]
            if call.method == "HEAD":
                return httpx.Response(200, headers={"content-range": f"*/{len(result)}"})
            return httpx.Response(200, json=result)

        if call.method == "POST":
            inserted = []
            for row in call.body:
                row = dict(row)
                if row.get("id") is None:
                    self._next_id += 1
                    row["id"] = self._next_id
                row.setdefault("created_at", f"2026-10-19T12:00:{len(rows):02d}")
                rows.append(row)
                inserted.append(row)
            if representation:
                return httpx.Response(201, json=inserted)
            return httpx.Response(201)

        matched = self._filtered(rows, call)
        if call.method == "PATCH":
            for row in matched:
                row.update(call.body)
        elif call.method == "DELETE":
            ids = {id(r) for r in matched}
            self.tables[table] = [r for r in rows if id(r) not in ids]
        if representation:
            return httpx.Response(200, json=matched)
        return httpx.Response(204)

    def _auth(self, endpoint: str, call: Call) -> httpx.Response:
        if endpoint == "token":
            email, password = call.body.get("email"), call.body.get("password")
            if self.passwords.get(email) != password:
                return httpx.Response(400, json={"error": "invalid_grant", "error_description": "Invalid login credentials"})
            token = self.sign_in_token(email)
            return httpx.Response(200, json={
                "access_token": token,
                "refresh_token": "refresh",
                "expires_in": 3600,
                "user": {"id": "hosted-user", "email": email},
            })
        if endpoint == "signup":
            if self.signup_failure:
                status, payload = self.signup_failure
                return httpx.Response(status, json=payload)
            return httpx.Response(200, json={"id": "hosted-new-user", "email": call.body.get("email")})
        if endpoint == "logout":
            return httpx.Response(204)
        if endpoint == "user":
            token = call.headers.get("authorization", "").partition(" ")[2]
            if token in self.valid_tokens:
                return httpx.Response(200, json=self.valid_tokens[token])
            return httpx.Response(401, json={"msg": "invalid JWT"})
        if endpoint == "health":
            return httpx.Response(200, json={"name": "auth"})
        return httpx.Response(404, json={"msg": "not found"})


@pytest.fixture
def hosted() -> FakeHostedService:
    return FakeHostedService()


@pytest.fixture
def make_backend(hosted) -> Callable[..., HostedBackend]:
    def factory(access_token: Optional[str] = None) -> HostedBackend:
        return HostedBackend(
            HOSTED_URL,
            ANON_KEY,
            access_token=access_token,
            transport=httpx.MockTransport(hosted.handler),
        )
    return factory


@pytest.fixture
def client(make_backend):
    async def override_backend(request: Request):
        session = read_hosted_cookie(request)
        backend = make_backend(session.access_token if session else None)
        try:
            yield backend
        finally:
            await backend.aclose()

    app.dependency_overrides[get_backend] = override_backend
    with TestClient(app, follow_redirects=False) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def local_session_cookie(**overrides) -> str:
    user = {
        "id": "clerk-1",
        "email": "clerk@example.com",
        "full_name": "Asha Nair",
        "role": "clerk",
        "status": "active",
    }
    user.update(overrides)
    return json.dumps(user, separators=(",", ":"))


@pytest.fixture
def clerk_client(client):
    """Client carrying a local fallback session"""
    client.cookies.set("clerk_session", local_session_cookie())
    return client
