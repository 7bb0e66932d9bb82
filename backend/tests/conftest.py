"""
Pytest configuration: test environment and an in-memory stand-in for the companies collection.

Environment variables are set before any company_api import, since settings are read
when the app module is imported.
"""

import copy
import os
from types import SimpleNamespace

os.environ.setdefault("NODE_ENV", "test")
os.environ.setdefault("MONGO_URL", "localhost")
os.environ.setdefault("DB", "test")

import pytest
from bson import ObjectId
from fastapi.testclient import TestClient
from pymongo.errors import PyMongoError

from company_api.core.database import get_company_collection
from company_api.main import app as default_app

HTTPS = {"x-forwarded-proto": "https"}


class FakeCollection:
    """Just enough of pymongo's Collection for the company service."""

    def __init__(self, fail_inserts: bool = False, fail_reads: bool = False) -> None:
        self.docs: list[dict] = []
        self.fail_inserts = fail_inserts
        self.fail_reads = fail_reads

    def find(self, filter=None, projection=None):
        if self.fail_reads:
            raise PyMongoError("connection refused")
        out = []
        for doc in self.docs:
            if projection:
                out.append({k: copy.deepcopy(v) for k, v in doc.items() if projection.get(k)})
            else:
                out.append(copy.deepcopy(doc))
        return iter(out)

    def find_one(self, filter=None):
        if self.fail_reads:
            raise PyMongoError("connection refused")
        for doc in self.docs:
            if all(doc.get(k) == v for k, v in (filter or {}).items()):
                return copy.deepcopy(doc)
        return None

    def insert_one(self, document):
        if self.fail_inserts:
            raise PyMongoError("not primary")
        document.setdefault("_id", ObjectId())
        self.docs.append(copy.deepcopy(document))
        return SimpleNamespace(inserted_id=document["_id"])


@pytest.fixture
def collection() -> FakeCollection:
    return FakeCollection()


@pytest.fixture
def make_client():
    """Build a TestClient for an app with the companies collection overridden."""
    opened: list = []

    def _make(collection: FakeCollection, app=None, https: bool = True) -> TestClient:
        target = app or default_app
        target.dependency_overrides[get_company_collection] = lambda: collection
        client = TestClient(target, headers=HTTPS if https else None)
        client.__enter__()
        opened.append((client, target))
        return client

    yield _make
    for client, target in opened:
        client.__exit__(None, None, None)
        target.dependency_overrides.clear()


@pytest.fixture
def client(make_client, collection) -> TestClient:
    return make_client(collection)


@pytest.fixture
def valid_company() -> dict:
    return {
        "name": " Acme ",
        "address": " 1 Main Street ",
        "city": "Springfield ",
        "country": " US",
    }
