"""
In-memory stand-in for the supabase-py client.

Implements the parts of the query builder, RPC, storage and auth surfaces the
API uses. Tables are lists of dict rows; unique constraints raise the same
PostgREST APIError (code 23505) the real backend returns. Failures can be
injected per (table, operation) or per storage operation.
"""

import re
import uuid
from datetime import datetime, timedelta, timezone
from types import SimpleNamespace
from typing import Any, Dict, List, Optional, Tuple

from postgrest.exceptions import APIError

_EPOCH = datetime(2026, 1, 1, tzinfo=timezone.utc)

UNIQUE_KEYS = {
    "profiles": [("user_id",)],
    "user_roles": [("user_id",)],
    "notification_settings": [("user_id",)],
    "suppliers": [("cnpj",)],
    "contracts": [("contract_number",)],
}

TABLES_WITH_UPDATED_AT = {
    "profiles", "suppliers", "contracts", "obligations", "payments", "notification_settings",
}


def api_error(code: str, message: str = "backend error") -> APIError:
    return APIError({"code": code, "message": message, "details": None, "hint": None})


def _ilike(value: Any, pattern: str) -> bool:
    """SQL ILIKE: % and _ are wildcards, a backslash escapes the next character"""
    if value is None:
        return False
    regex, chars = [], iter(pattern)
    for ch in chars:
        if ch == "\\":
            regex.append(re.escape(next(chars, "\\")))
        elif ch == "%":
            regex.append(".*")
        elif ch == "_":
            regex.append(".")
        else:
            regex.append(re.escape(ch))
    return re.fullmatch("".join(regex), str(value), flags=re.IGNORECASE | re.DOTALL) is not None


def _split_logic(expression: str) -> List[str]:
    """Split an or= expression on commas outside quotes and parentheses"""
    parts, current, depth, quoted, escaped = [], [], 0, False, False
    for ch in expression:
        if escaped:
            escaped = False
        elif ch == "\\" and quoted:
            escaped = True
        elif ch == '"':
            quoted = not quoted
        elif not quoted and ch == "(":
            depth += 1
        elif not quoted and ch == ")":
            depth -= 1
        elif not quoted and depth == 0 and ch == ",":
            parts.append("".join(current))
            current = []
            continue
        current.append(ch)
    parts.append("".join(current))
    return parts


def _unquote(value: str) -> str:
    """PostgREST filter value: a double-quoted value may hold reserved characters"""
    if value.startswith('"') and value.endswith('"') and len(value) >= 2:
        return re.sub(r"\\(.)", r"\1", value[1:-1], flags=re.DOTALL)
    if any(ch in value for ch in '(),"'):
        raise api_error("PGRST100", f'failed to parse logic tree ("{value}")')
    return value


class FakeResponse:
    def __init__(self, data: Any):
        self.data = data
        self.count = len(data) if isinstance(data, list) else None


class FakeQuery:
    def __init__(self, db: "FakeSupabase", table: str):
        self.db = db
        self.table_name = table
        self.operation = "select"
        self.columns = "*"
        self.payload: Any = None
        self.on_conflict: Optional[str] = None
        self.filters: List = []
        self.order_by: List[Tuple[str, bool]] = []
        self._limit: Optional[int] = None
        self._offset = 0
        self._single = False
        self._error: Optional[APIError] = None

    # Operations

    def select(self, columns: str = "*", **kwargs):
        self.operation = "select"
        self.columns = columns
        return self

    def insert(self, payload, **kwargs):
        self.operation = "insert"
        self.payload = payload
        return self

    def update(self, payload, **kwargs):
        self.operation = "update"
        self.payload = payload
        return self

    def upsert(self, payload, on_conflict: Optional[str] = None, **kwargs):
        self.operation = "upsert"
        self.payload = payload
        self.on_conflict = on_conflict
        return self

    def delete(self, **kwargs):
        self.operation = "delete"
        return self

    # Filters and modifiers

    def eq(self, column, value):
        self.filters.append(lambda row: row.get(column) == value)
        return self

    def neq(self, column, value):
        self.filters.append(lambda row: row.get(column) != value)
        return self

    def in_(self, column, values):
        values = list(values)
        self.filters.append(lambda row: row.get(column) in values)
        return self

    def gte(self, column, value):
        self.filters.append(lambda row: row.get(column) is not None and str(row.get(column)) >= str(value))
        return self

    def lte(self, column, value):
        self.filters.append(lambda row: row.get(column) is not None and str(row.get(column)) <= str(value))
        return self

    def ilike(self, column, pattern):
        self.filters.append(lambda row: _ilike(row.get(column), pattern))
        return self

    def or_(self, expression: str):
        clauses = []
        try:
            for clause in _split_logic(expression):
                column, operator, value = clause.split(".", 2)
                if operator == "ilike":
                    pattern = _unquote(value).replace("*", "%")
                    clauses.append(lambda row, c=column, p=pattern: _ilike(row.get(c), p))
                elif operator == "in":
                    if not (value.startswith("(") and value.endswith(")")):
                        raise api_error("PGRST100", f'failed to parse filter ("{value}")')
                    values = [_unquote(v) for v in _split_logic(value[1:-1])]
                    clauses.append(lambda row, c=column, vs=values: row.get(c) in vs)
                else:
                    raise NotImplementedError(f"or_ operator {operator}")
        except APIError as e:
            # PostgREST rejects the request when it is sent
            self._error = e
            return self
        self.filters.append(lambda row: any(clause(row) for clause in clauses))
        return self

    def order(self, column, desc: bool = False, **kwargs):
        self.order_by.append((column, desc))
        return self

    def limit(self, count: int):
        self._limit = count
        return self

    def offset(self, count: int):
        self._offset = count
        return self

    def range(self, start: int, end: int):
        self._offset = start
        self._limit = end - start + 1
        return self

    def single(self):
        self._single = True
        return self

    # Execution

    def _matches(self, row) -> bool:
        return all(f(row) for f in self.filters)

    def _project(self, row):
        if self.columns.strip() == "*":
            return dict(row)
        names = [c.strip() for c in self.columns.split(",") if c.strip()]
        return {name: row.get(name) for name in names}

    def execute(self) -> FakeResponse:
        self.db.calls.append((self.table_name, self.operation))
        if self._error is not None:
            raise self._error
        failure = self.db.failures.get((self.table_name, self.operation))
        if failure is not None:
            raise failure
        return getattr(self, f"_execute_{self.operation}")()

    def _execute_select(self):
        rows = [r for r in self.db.rows(self.table_name) if self._matches(r)]
        for column, desc in reversed(self.order_by):
            present = [r for r in rows if r.get(column) is not None]
            missing = [r for r in rows if r.get(column) is None]
            present.sort(key=lambda r: r[column], reverse=desc)
            rows = present + missing
        rows = rows[self._offset:]
        if self._limit is not None:
            rows = rows[:self._limit]
        data = [self._project(r) for r in rows]
        if self._single:
            if len(data) != 1:
                raise api_error("PGRST116", "JSON object requested, multiple (or no) rows returned")
            return FakeResponse(data[0])
        return FakeResponse(data)

    def _execute_insert(self):
        payload = self.payload if isinstance(self.payload, list) else [self.payload]
        return FakeResponse([self.db.insert_row(self.table_name, dict(row)) for row in payload])

    def _execute_update(self):
        updated = []
        for row in self.db.rows(self.table_name):
            if self._matches(row):
                candidate = {**row, **self.payload}
                self.db.check_unique(self.table_name, candidate, ignore_id=row["id"])
                row.update(self.payload)
                updated.append(dict(row))
        return FakeResponse(updated)

    def _execute_upsert(self):
        payload = self.payload if isinstance(self.payload, list) else [self.payload]
        keys = [k.strip() for k in (self.on_conflict or "id").split(",")]
        result = []
        for item in payload:
            existing = next(
                (r for r in self.db.rows(self.table_name) if all(r.get(k) == item.get(k) for k in keys)),
                None,
            )
            if existing is None:
                result.append(self.db.insert_row(self.table_name, dict(item)))
            else:
                existing.update(item)
                result.append(dict(existing))
        return FakeResponse(result)

    def _execute_delete(self):
        table = self.db.rows(self.table_name)
        deleted = [r for r in table if self._matches(r)]
        self.db.tables[self.table_name] = [r for r in table if not self._matches(r)]
        return FakeResponse([dict(r) for r in deleted])


class FakeRpc:
    def __init__(self, db: "FakeSupabase", name: str, params: Dict[str, Any]):
        self.db = db
        self.name = name
        self.params = params

    def execute(self) -> FakeResponse:
        self.db.calls.append(("rpc", self.name))
        roles = [r for r in self.db.rows("user_roles") if r["user_id"] == self.params.get("_user_id")]
        if self.name == "has_role":
            return FakeResponse(any(r["role"] == self.params.get("_role") for r in roles))
        if self.name == "get_user_role":
            return FakeResponse(roles[0]["role"] if roles else "visualizador")
        raise api_error("PGRST202", f"Could not find the function {self.name}")


class FakeBucket:
    def __init__(self, storage: "FakeStorage", name: str):
        self.storage = storage
        self.name = name

    def _maybe_fail(self, operation: str):
        failure = self.storage.failures.get(operation)
        if failure is not None:
            raise failure

    def upload(self, path: str, file: bytes, file_options: Optional[dict] = None):
        self._maybe_fail("upload")
        if (self.name, path) in self.storage.objects:
            raise RuntimeError("The resource already exists")
        self.storage.objects[(self.name, path)] = (file, dict(file_options or {}))
        return SimpleNamespace(path=path, full_path=f"{self.name}/{path}")

    def download(self, path: str) -> bytes:
        self._maybe_fail("download")
        if (self.name, path) not in self.storage.objects:
            raise RuntimeError("Object not found")
        return self.storage.objects[(self.name, path)][0]

    def remove(self, paths: List[str]):
        self._maybe_fail("remove")
        removed = []
        for path in paths:
            if self.storage.objects.pop((self.name, path), None) is not None:
                removed.append({"name": path})
        return removed

    def create_signed_url(self, path: str, expires_in: int, options: Optional[dict] = None):
        self._maybe_fail("create_signed_url")
        if (self.name, path) not in self.storage.objects:
            raise RuntimeError("Object not found")
        return {"signedURL": f"https://storage.test/{self.name}/{path}?token=signed&expires_in={expires_in}"}


class FakeStorage:
    def __init__(self):
        self.objects: Dict[Tuple[str, str], Tuple[bytes, dict]] = {}
        self.failures: Dict[str, Exception] = {}

    def from_(self, bucket: str) -> FakeBucket:
        return FakeBucket(self, bucket)

    def keys(self, bucket: Optional[str] = None) -> List[str]:
        return [path for (b, path) in self.objects if bucket is None or b == bucket]


class FakeAuth:
    def __init__(self):
        self.users: Dict[str, SimpleNamespace] = {}
        self.passwords: Dict[str, str] = {}
        self.tokens: Dict[str, SimpleNamespace] = {}
        self.signed_out = 0
        self.admin = FakeAuthAdmin(self)

    def create_user(self, email: str, password: str = "secret123", full_name: str = "") -> Tuple[SimpleNamespace, str]:
        user = SimpleNamespace(
            id=str(uuid.uuid4()),
            email=email,
            user_metadata={"full_name": full_name} if full_name else {},
            app_metadata={},
        )
        self.users[email] = user
        self.passwords[email] = password
        token = f"token-{user.id}"
        self.tokens[token] = user
        return user, token

    def sign_up(self, credentials: dict):
        email = credentials["email"]
        if email in self.users:
            raise RuntimeError("User already registered")
        full_name = (credentials.get("options") or {}).get("data", {}).get("full_name", "")
        user, token = self.create_user(email, credentials["password"], full_name)
        return SimpleNamespace(user=user, session=SimpleNamespace(access_token=token))

    def sign_in_with_password(self, credentials: dict):
        email = credentials["email"]
        if self.passwords.get(email) != credentials["password"]:
            raise RuntimeError("Invalid login credentials")
        user = self.users[email]
        return SimpleNamespace(user=user, session=SimpleNamespace(access_token=f"token-{user.id}"))

    def get_user(self, jwt: Optional[str] = None):
        user = self.tokens.get(jwt)
        if user is None:
            raise RuntimeError("invalid JWT")
        return SimpleNamespace(user=user)


class FakeAuthAdmin:
    def __init__(self, auth: "FakeAuth"):
        self.auth = auth

    def sign_out(self, jwt: str, scope: str = "global"):
        self.auth.tokens.pop(jwt, None)
        self.auth.signed_out += 1


class FakeSupabase:
    def __init__(self):
        self.tables: Dict[str, List[dict]] = {}
        self.calls: List[Tuple[str, str]] = []
        self.failures: Dict[Tuple[str, str], Exception] = {}
        self.storage = FakeStorage()
        self.auth = FakeAuth()
        self._clock = 0

    def table(self, name: str) -> FakeQuery:
        return FakeQuery(self, name)

    def rpc(self, name: str, params: Optional[dict] = None) -> FakeRpc:
        return FakeRpc(self, name, params or {})

    # Helpers for tests

    def rows(self, table: str) -> List[dict]:
        return self.tables.setdefault(table, [])

    def fail(self, table: str, operation: str, error: Optional[Exception] = None):
        self.failures[(table, operation)] = error or api_error("XX000", "injected failure")

    def writes(self, table: Optional[str] = None) -> List[Tuple[str, str]]:
        return [
            (t, op) for t, op in self.calls
            if op in ("insert", "update", "upsert", "delete") and (table is None or t == table)
        ]

    def now(self) -> str:
        self._clock += 1
        return (_EPOCH + timedelta(seconds=self._clock)).isoformat()

    def check_unique(self, table: str, row: dict, ignore_id: Optional[str] = None):
        for columns in UNIQUE_KEYS.get(table, []):
            if any(row.get(c) is None for c in columns):
                continue
            for other in self.rows(table):
                if other["id"] != ignore_id and all(other.get(c) == row.get(c) for c in columns):
                    raise api_error("23505", f'duplicate key value violates unique constraint "{table}_{"_".join(columns)}_key"')

    def insert_row(self, table: str, row: dict) -> dict:
        row.setdefault("id", str(uuid.uuid4()))
        row.setdefault("created_at", self.now())
        if table in TABLES_WITH_UPDATED_AT:
            row.setdefault("updated_at", row["created_at"])
        self.check_unique(table, row)
        self.rows(table).append(row)
        return dict(row)

    def seed(self, table: str, **values) -> dict:
        """Insert a row directly, without recording a call"""
        return self.insert_row(table, dict(values))
