"""
tests/test_business_api.py

HTTP-level tests for the import, listing and admin routers, run against an
in-memory SQLite session through FastAPI's TestClient.
"""

from __future__ import annotations

from collections.abc import Iterator

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

import app.api.dependencies as dependencies
from app.api.routers import admin_businesses_router, business_import_router, businesses_router
from app.cache.business_cache import BusinessCache, featured_businesses_key
from app.config import BusinessImportSettings
from db.models.business import Business
from db.session import get_db

CSV_BODY = (
    "placeid,title,city,categoryname,email,featured\n"
    "p1,Harbour Cafe,Sydney,Cafe,hello@harbour.example,true\n"
    "p2,Bondi Bakery,Sydney,Bakery,bad-email,false\n"
    "p3,Yarra Bar,Melbourne,Bar,,false\n"
).encode("utf-8")


@pytest.fixture()
def cache() -> BusinessCache:
    return BusinessCache()


@pytest.fixture()
def client(db_session: Session, cache: BusinessCache) -> Iterator[TestClient]:
    application = FastAPI()
    application.state.business_cache = cache
    application.include_router(business_import_router)
    application.include_router(businesses_router)
    application.include_router(admin_businesses_router)

    def _override_get_db() -> Iterator[Session]:
        yield db_session

    application.dependency_overrides[get_db] = _override_get_db
    with TestClient(application) as test_client:
        yield test_client


def _upload(content: bytes, filename: str = "businesses.csv", content_type: str = "text/csv") -> dict:
    return {"file": (filename, content, content_type)}


class TestImportEndpoints:
    def test_rejects_non_csv_upload(self, client: TestClient) -> None:
        response = client.post("/admin/import-csv", files=_upload(b"{}", "data.json", "application/json"))

        assert response.status_code == 400
        assert response.json()["detail"] == "Only CSV files are allowed."

    def test_rejects_oversized_upload(self, client: TestClient, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(
            dependencies,
            "get_business_import_settings",
            lambda: BusinessImportSettings(max_upload_bytes=16),
        )

        response = client.post("/admin/import-csv", files=_upload(CSV_BODY))

        assert response.status_code == 413

    def test_missing_header_is_bad_request(self, client: TestClient) -> None:
        response = client.post("/admin/import-csv/preview", files=_upload(b""))

        assert response.status_code == 400
        assert response.json()["detail"] == "CSV header row is missing."

    def test_preview(self, client: TestClient) -> None:
        response = client.post("/admin/import-csv/preview", files=_upload(CSV_BODY))

        assert response.status_code == 200
        body = response.json()
        assert body["headers"] == ["placeid", "title", "city", "categoryname", "email", "featured"]
        assert body["total_rows"] == 3
        assert [(e["row"], e["field"]) for e in body["validation_errors"]] == [(2, "email")]

    def test_validate_writes_nothing(self, client: TestClient, db_session: Session) -> None:
        response = client.post("/admin/import-csv/validate", files=_upload(CSV_BODY))

        assert response.status_code == 200
        body = response.json()
        assert body["success"] == 2
        assert body["created"] == 0
        assert db_session.get(Business, "p1") is None

    def test_import_creates_valid_rows_and_invalidates_cache(
        self, client: TestClient, db_session: Session, cache: BusinessCache
    ) -> None:
        cache.set(featured_businesses_key(6), [], 60_000)

        response = client.post("/admin/import-csv", files=_upload(CSV_BODY))

        assert response.status_code == 200
        body = response.json()
        assert (body["success"], body["created"], body["updated"]) == (2, 2, 0)
        assert body["errors"][0]["row"] == 2
        assert body["errors"][0]["kind"] == "validation"
        assert body["warnings"] == ["Found 1 validation errors. Processing valid rows only."]
        assert db_session.get(Business, "p1").featured is True
        assert not cache.has(featured_businesses_key(6))

    def test_reimport_with_update_duplicates(self, client: TestClient) -> None:
        client.post("/admin/import-csv", files=_upload(CSV_BODY))

        response = client.post(
            "/admin/import-csv",
            params={"update_duplicates": "true", "skip_duplicates": "false"},
            files=_upload(CSV_BODY),
        )

        body = response.json()
        assert (body["created"], body["updated"], body["success"]) == (0, 2, 2)

    def test_batch_size_is_bounded(self, client: TestClient) -> None:
        response = client.post("/admin/import-csv", params={"batch_size": 0}, files=_upload(CSV_BODY))

        assert response.status_code == 422


class TestListingEndpoints:
    @pytest.fixture(autouse=True)
    def _seed(self, client: TestClient) -> None:
        client.post("/admin/import-csv", files=_upload(CSV_BODY))

    def test_list_and_filter(self, client: TestClient) -> None:
        everything = client.get("/businesses").json()
        sydney = client.get("/businesses", params={"city": "Sydney"}).json()

        assert [row["title"] for row in everything] == ["Harbour Cafe", "Yarra Bar"]
        assert [row["title"] for row in sydney] == ["Harbour Cafe"]

    def test_featured(self, client: TestClient) -> None:
        response = client.get("/businesses/featured", params={"limit": 5})

        assert response.status_code == 200
        assert [row["place_id"] for row in response.json()] == ["p1"]

    def test_random(self, client: TestClient) -> None:
        rows = client.get("/businesses/random").json()

        assert sorted(row["place_id"] for row in rows) == ["p1", "p3"]

    def test_stats(self, client: TestClient) -> None:
        assert client.get("/businesses/stats").json() == {"total": 2, "active": 2, "featured": 1}

    def test_slug_lookup(self, client: TestClient) -> None:
        found = client.get("/businesses/slug/harbour-cafe-p1")
        missing = client.get("/businesses/slug/nope")

        assert found.status_code == 200
        assert found.json()["title"] == "Harbour Cafe"
        assert missing.status_code == 404

    def test_cities(self, client: TestClient) -> None:
        assert client.get("/cities").json() == [
            {"city": "Melbourne", "count": 1},
            {"city": "Sydney", "count": 1},
        ]


class TestAdminEndpoints:
    @pytest.fixture(autouse=True)
    def _seed(self, client: TestClient) -> None:
        client.post("/admin/import-csv", files=_upload(CSV_BODY))

    def test_set_featured(self, client: TestClient, cache: BusinessCache) -> None:
        client.get("/businesses/featured")
        assert cache.has(featured_businesses_key(6))

        response = client.patch("/admin/businesses/p3/featured", json={"featured": True})

        assert response.status_code == 200
        assert response.json() == {"place_id": "p3", "featured": True, "deleted": False}
        assert not cache.has(featured_businesses_key(6))
        featured = client.get("/businesses/featured").json()
        assert sorted(row["place_id"] for row in featured) == ["p1", "p3"]

    def test_set_featured_missing(self, client: TestClient) -> None:
        response = client.patch("/admin/businesses/missing/featured", json={"featured": True})

        assert response.status_code == 404

    def test_delete(self, client: TestClient) -> None:
        response = client.delete("/admin/businesses/p1")

        assert response.status_code == 200
        assert response.json()["deleted"] is True
        assert client.delete("/admin/businesses/p1").status_code == 404
        assert client.get("/businesses/slug/harbour-cafe-p1").status_code == 404


class TestMissingCache:
    def test_listing_without_cache_is_unavailable(self, db_session: Session) -> None:
        application = FastAPI()
        application.include_router(businesses_router)
        application.dependency_overrides[get_db] = lambda: db_session

        with TestClient(application) as test_client:
            response = test_client.get("/businesses/stats")

        assert response.status_code == 503
