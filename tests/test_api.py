"""
Tests for the HTTP API.
"""

import io

import pytest
from fastapi.testclient import TestClient
from pypdf import PdfReader

from virement.infrastructure.directory import AccountDirectory
from virement.main import create_app


ORDER = {
    "payer_account_id": "acc1",
    "beneficiary_id": "6",
    "amount": "1234.56",
    "purpose": "Facture F-2025-031",
    "express": False,
}


@pytest.fixture
def client():
    with TestClient(create_app(AccountDirectory.with_defaults())) as test_client:
        yield test_client


@pytest.fixture
def debug_client(monkeypatch):
    monkeypatch.setenv("DEBUG", "true")
    with TestClient(create_app()) as test_client:
        yield test_client


class TestHealth:
    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["accounts"] == 6
        assert body["suppliers"] == 3
        assert body["generating"] is False


class TestDirectoryRoutes:
    def test_list_accounts(self, client):
        response = client.get("/api/v1/accounts")

        assert response.status_code == 200
        accounts = response.json()
        assert len(accounts) == 6
        assert accounts[0]["company_name"] == "AKOR FOODS"
        assert accounts[0]["letterhead"] is None

    def test_search_suppliers(self, client):
        response = client.get("/api/v1/suppliers", params={"search": "gamma"})

        assert response.status_code == 200
        assert [s["name"] for s in response.json()] == ["Logistique Gamma"]


class TestLetterheadUpload:
    def test_upload(self, client, letterhead_pdf):
        response = client.post(
            "/api/v1/accounts/acc1/letterhead",
            files={"file": ("entete.pdf", letterhead_pdf, "application/pdf")},
        )

        assert response.status_code == 200
        assert response.json()["letterhead"] == {
            "name": "entete.pdf",
            "size_bytes": len(letterhead_pdf),
        }

    def test_rejects_wrong_type(self, client):
        response = client.post(
            "/api/v1/accounts/acc1/letterhead",
            files={"file": ("logo.png", b"\x89PNG", "image/png")},
        )
        assert response.status_code == 400

    def test_rejects_empty_file(self, client):
        response = client.post(
            "/api/v1/accounts/acc1/letterhead",
            files={"file": ("entete.pdf", b"", "application/pdf")},
        )
        assert response.status_code == 400

    def test_rejects_corrupt_pdf(self, client):
        response = client.post(
            "/api/v1/accounts/acc1/letterhead",
            files={"file": ("entete.pdf", b"not a pdf at all", "application/pdf")},
        )

        assert response.status_code == 400
        detail = response.json()["detail"]
        assert "corrompu" in detail
        assert "génération" not in detail

    def test_corrupt_upload_leaves_account_unchanged(self, client):
        client.post(
            "/api/v1/accounts/acc1/letterhead",
            files={"file": ("entete.pdf", b"%PDF-1.7\nbroken", "application/pdf")},
        )

        accounts = {a["id"]: a for a in client.get("/api/v1/accounts").json()}
        assert accounts["acc1"]["letterhead"] is None

    def test_rejects_oversized_file(self, client, letterhead_pdf, monkeypatch):
        from virement.config import get_settings

        monkeypatch.setenv("MAX_LETTERHEAD_BYTES", "100")
        get_settings.cache_clear()

        response = client.post(
            "/api/v1/accounts/acc1/letterhead",
            files={"file": ("entete.pdf", letterhead_pdf, "application/pdf")},
        )
        assert response.status_code == 413

    def test_unknown_account(self, client, letterhead_pdf):
        response = client.post(
            "/api/v1/accounts/nope/letterhead",
            files={"file": ("entete.pdf", letterhead_pdf, "application/pdf")},
        )

        assert response.status_code == 404
        assert response.json()["code"] == "unknown_account"

    def test_delete(self, client, letterhead_pdf):
        client.post(
            "/api/v1/accounts/acc1/letterhead",
            files={"file": ("entete.pdf", letterhead_pdf, "application/pdf")},
        )
        response = client.delete("/api/v1/accounts/acc1/letterhead")

        assert response.status_code == 200
        assert response.json()["letterhead"] is None


class TestOrders:
    def test_generates_pdf(self, client):
        response = client.post("/api/v1/orders", json=ORDER)

        assert response.status_code == 200
        assert response.headers["content-type"] == "application/pdf"
        assert 'filename="ordre_virement_Services_Beta_SARL.pdf"' in response.headers["content-disposition"]
        reader = PdfReader(io.BytesIO(response.content))
        assert len(reader.pages) == 1
        assert "164787000215400030054321" in reader.pages[0].extract_text()

    def test_generates_over_letterhead(self, client, letterhead_pdf):
        client.post(
            "/api/v1/accounts/acc1/letterhead",
            files={"file": ("entete.pdf", letterhead_pdf, "application/pdf")},
        )
        response = client.post("/api/v1/orders", json=ORDER)

        assert response.status_code == 200
        text = PdfReader(io.BytesIO(response.content)).pages[0].extract_text()
        assert "AKOR FOODS SARL" in text

    @pytest.mark.parametrize("amount", ["0", "-5", "", "0.001", "1e18", "12345678901234567890123456789"])
    def test_rejects_bad_amount(self, client, amount):
        response = client.post("/api/v1/orders", json={**ORDER, "amount": amount})

        assert response.status_code == 422
        assert response.json()["field"] == "amount"
        assert response.json()["code"] == "validation_error"

    def test_rejects_missing_purpose(self, client):
        response = client.post("/api/v1/orders", json={**ORDER, "purpose": "  "})

        assert response.status_code == 422
        assert response.json()["field"] == "purpose"

    def test_rejects_unknown_currency(self, client):
        response = client.post("/api/v1/orders", json={**ORDER, "currency": "EUR"})

        assert response.status_code == 422
        assert response.json()["field"] == "currency"

    def test_unknown_supplier(self, client):
        response = client.post("/api/v1/orders", json={**ORDER, "beneficiary_id": "404"})

        assert response.status_code == 404
        assert response.json()["code"] == "unknown_supplier"

    def test_corrupt_letterhead_in_directory(self):
        from virement.domain.models import Letterhead

        directory = AccountDirectory.with_defaults()
        directory.attach_letterhead("acc1", Letterhead(name="broken.pdf", content=b"garbage"))

        with TestClient(create_app(directory)) as client:
            response = client.post("/api/v1/orders", json=ORDER)

        assert response.status_code == 400
        assert "papier à en-tête" in response.json()["detail"]

    def test_busy_generator_conflicts(self, client):
        client.app.state.order_service.busy = True

        response = client.post("/api/v1/orders", json=ORDER)

        assert response.status_code == 409
        assert response.json()["code"] == "generation_in_progress"


class TestDebugRoutes:
    def test_disabled_by_default(self, client):
        assert client.get("/api/v1/debug/words", params={"amount": "21"}).status_code == 404

    def test_words(self, debug_client):
        response = debug_client.get("/api/v1/debug/words", params={"amount": "1234.56"})

        assert response.status_code == 200
        assert response.json()["words"] == (
            "Mille deux cent trente-quatre dirhams et cinquante-six centimes"
        )

    def test_bad_amount(self, debug_client):
        response = debug_client.get("/api/v1/debug/words", params={"amount": "abc"})
        assert response.status_code == 400
