"""
Shared fixtures.

Supabase is replaced by an in-memory stand-in that understands the subset of
the postgrest query builder, auth and storage APIs the services use.
"""

import copy
import itertools
import time
import uuid
from types import SimpleNamespace

import jwt
import pytest
from postgrest.exceptions import APIError

JWT_SECRET = "test-jwt-secret-with-enough-length-for-hs256"

TEST_ENV = {
    "SECRET_KEY": "test-secret-key",
    "SUPABASE_URL": "https://fake.supabase.co",
    "SUPABASE_ANON_KEY": "anon-key",
    "SUPABASE_SERVICE_ROLE_KEY": "service-key",
    "SUPABASE_JWT_SECRET": JWT_SECRET,
    "DATABASE_URL": "sqlite://",
    "STRIPE_SECRET_KEY": "sk_test_fake",
    "STRIPE_SANDBOX_MODE": "false",
    "DEFAULT_LOCALE": "en",
    "LOG_LEVEL": "WARNING",
}

_clock = itertools.count(1)


def _literal(value):
    return {"true": True, "false": False, "null": None}.get(value, value)


def _sort_key(value):
    return (value is None, value if value is not None else 0)


class FakeResponse:
    def __init__(self, data):
        self.data = data
        self.count = len(data) if isinstance(data, list) else None


class FakeQuery:
    def __init__(self, db, table):
        self.db = db
        self.table_name = table
        self.op = None
        self.payload = None
        self.filters = []
        self.orders = []
        self.limit_n = None

    # operations

    def select(self, *columns, **kwargs):
        self.op = self.op or "select"
        return self

    def insert(self, payload, **kwargs):
        self.op, self.payload = "insert", payload
        return self

    def update(self, payload, **kwargs):
        self.op, self.payload = "update", payload
        return self

    def delete(self, **kwargs):
        self.op = "delete"
        return self

    # filters

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

    def is_(self, column, value):
        expected = _literal(value)
        self.filters.append(lambda row: row.get(column) is expected)
        return self

    def or_(self, expression):
        conditions = []
        for clause in expression.split(","):
            column, operator, value = clause.split(".", 2)
            assert operator == "eq", operator
            conditions.append((column, _literal(value)))
        self.filters.append(lambda row: any(row.get(c) == v for c, v in conditions))
        return self

    def order(self, column, desc=False, **kwargs):
        self.orders.append((column, desc))
        return self

    def limit(self, count):
        self.limit_n = count
        return self

    # execution

    def _matches(self, row):
        return all(check(row) for check in self.filters)

    def execute(self):
        failure = self.db.failures.pop(self.table_name, None)
        if failure is not None:
            raise failure

        rows = self.db.tables.setdefault(self.table_name, [])
        if self.op == "insert":
            return FakeResponse(self._insert(rows))
        if self.op == "update":
            updated = []
            for row in rows:
                if self._matches(row):
                    row.update(copy.deepcopy(self.payload))
                    updated.append(copy.deepcopy(row))
            return FakeResponse(updated)
        if self.op == "delete":
            removed = [row for row in rows if self._matches(row)]
            self.db.tables[self.table_name] = [row for row in rows if not self._matches(row)]
            return FakeResponse(copy.deepcopy(removed))

        result = [copy.deepcopy(row) for row in rows if self._matches(row)]
        for column, desc in reversed(self.orders):
            result.sort(key=lambda row: _sort_key(row.get(column)), reverse=desc)
        if self.limit_n is not None:
            result = result[: self.limit_n]
        return FakeResponse(result)

    def _insert(self, rows):
        payload = self.payload if isinstance(self.payload, list) else [self.payload]
        inserted = []
        for item in payload:
            row = copy.deepcopy(item)
            row.setdefault("id", str(uuid.uuid4()))
            row.setdefault("created_at", f"2024-01-01T00:00:{next(_clock):06d}")
            for columns in self.db.unique.get(self.table_name, ()):
                key = tuple(row.get(c) for c in columns)
                if any(tuple(other.get(c) for c in columns) == key for other in rows):
                    raise APIError(
                        {"code": "23505", "message": "duplicate key value", "details": None}
                    )
            rows.append(row)
            inserted.append(copy.deepcopy(row))
        return inserted


class FakeAuthAdmin:
    def __init__(self, auth):
        self.auth = auth
        self.signed_out = []

    def create_user(self, attributes):
        email = attributes["email"]
        if email in self.auth.users:
            raise Exception("A user with this email address has already been registered")
        user_id = str(uuid.uuid4())
        self.auth.users[email] = {"id": user_id, "password": attributes["password"]}
        return SimpleNamespace(user=SimpleNamespace(id=user_id, email=email))

    def sign_out(self, token):
        self.signed_out.append(token)


class FakeAuth:
    def __init__(self):
        self.users = {}
        self.admin = FakeAuthAdmin(self)
        self.sign_outs = 0

    def add_user(self, email, password, user_id=None):
        user_id = user_id or str(uuid.uuid4())
        self.users[email] = {"id": user_id, "password": password}
        return user_id

    def sign_in_with_password(self, credentials):
        user = self.users.get(credentials["email"])
        if user is None or user["password"] != credentials["password"]:
            raise Exception("Invalid login credentials")
        return SimpleNamespace(
            user=SimpleNamespace(id=user["id"], email=credentials["email"]),
            session=SimpleNamespace(
                access_token=make_token(user["id"]),
                refresh_token=f"refresh-{user['id']}",
                expires_in=3600,
            ),
        )

    def sign_out(self):
        self.sign_outs += 1


class FakeBucket:
    def __init__(self, storage, name):
        self.storage = storage
        self.name = name

    def _check(self):
        error = self.storage.bucket_errors.get(self.name)
        if error is not None:
            raise Exception(error)

    def upload(self, path, file, file_options=None):
        self._check()
        self.storage.objects.setdefault(self.name, {})[path] = file
        return SimpleNamespace(path=path)

    def get_public_url(self, path):
        return f"https://fake.supabase.co/storage/v1/object/public/{self.name}/{path}?"

    def remove(self, names):
        self._check()
        bucket = self.storage.objects.setdefault(self.name, {})
        for name in names:
            bucket.pop(name, None)
        return []

    def list(self, path="", options=None):
        self._check()
        return [{"name": name} for name in self.storage.objects.get(self.name, {})]


class FakeStorage:
    def __init__(self):
        self.buckets = set()
        self.objects = {}
        self.bucket_errors = {}
        self.create_errors = {}

    def from_(self, name):
        return FakeBucket(self, name)

    def create_bucket(self, name, options=None):
        if name in self.create_errors:
            raise Exception(self.create_errors[name])
        if name in self.buckets:
            raise Exception({"message": "The resource already exists", "statusCode": "409"})
        self.buckets.add(name)

    def list_buckets(self):
        return [SimpleNamespace(id=name, name=name) for name in sorted(self.buckets)]


class FakeSupabase:
    def __init__(self):
        self.tables = {}
        self.failures = {}
        self.unique = {"branch_hours": [("branch_id", "day_of_week", "specific_date")]}
        self.auth = FakeAuth()
        self.storage = FakeStorage()

    def table(self, name):
        return FakeQuery(self, name)

    def seed(self, table, *rows):
        stored = self.tables.setdefault(table, [])
        for row in rows:
            row = dict(row)
            row.setdefault("id", str(uuid.uuid4()))
            row.setdefault("created_at", f"2024-01-01T00:00:{next(_clock):06d}")
            stored.append(row)

    def fail_next(self, table, message="boom", code="XX000"):
        self.failures[table] = APIError({"code": code, "message": message, "details": None})


def make_token(user_id, expires_in=3600, secret=JWT_SECRET):
    now = int(time.time())
    claims = {"sub": user_id, "aud": "authenticated", "iat": now, "exp": now + expires_in}
    return jwt.encode(claims, secret, algorithm="HS256")


@pytest.fixture(autouse=True)
def test_env(monkeypatch):
    for key, value in TEST_ENV.items():
        monkeypatch.setenv(key, value)
    monkeypatch.delenv("CORS_ALLOWED_ORIGINS", raising=False)
    monkeypatch.delenv("DEBUG_MODE", raising=False)

    from washdesk_shared import config, db

    monkeypatch.setattr(config, "_active_config", None)
    yield
    db.dispose_engine()


@pytest.fixture(autouse=True)
def fake_supabase(monkeypatch, test_env):
    from washdesk_shared.supabase.client import SupabaseClients

    fake = FakeSupabase()
    monkeypatch.setattr(SupabaseClients, "service", lambda: fake)
    monkeypatch.setattr(SupabaseClients, "anon", lambda: fake)
    monkeypatch.setattr(SupabaseClients, "session_client", lambda: fake)
    monkeypatch.setattr(SupabaseClients, "for_user", lambda token: fake)
    return fake


@pytest.fixture
def app(fake_supabase):
    from washdesk_admin.app import create_app

    app = create_app()
    app.config["TESTING"] = True
    return app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def admins(fake_supabase):
    """A general admin, a franchise admin owning one franchise and a branch admin."""
    fake = fake_supabase
    general = fake.auth.add_user("general@test.com", "password123")
    owner = fake.auth.add_user("franchise@test.com", "password123")
    branch_admin = fake.auth.add_user("branch@test.com", "password123")
    fake.seed(
        "admins",
        {"id": general, "email": "general@test.com", "name": "General", "role": "general"},
        {"id": owner, "email": "franchise@test.com", "name": "Owner", "role": "franchise"},
        {"id": branch_admin, "email": "branch@test.com", "name": "Clerk", "role": "branch"},
    )
    fake.seed(
        "franchises",
        {"id": "fr-1", "name": "North", "status": "active", "admin_id": owner},
        {"id": "fr-2", "name": "South", "status": "active", "admin_id": None},
    )
    fake.seed(
        "branches",
        {"id": "br-1", "name": "Downtown", "franchise_id": "fr-1", "ratings": 4.5},
        {"id": "br-2", "name": "Harbor", "franchise_id": "fr-2", "ratings": 3.0},
    )
    fake.seed("branch_admins", {"user_id": branch_admin, "branch_id": "br-1"})
    return SimpleNamespace(general=general, franchise=owner, branch=branch_admin)


@pytest.fixture
def auth_headers():
    def build(user_id):
        return {"Authorization": f"Bearer {make_token(user_id)}"}

    return build
