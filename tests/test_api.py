# File: tests/test_api.py
from unittest.mock import patch

import pytest

from services.errors import ExtractionFailure
from services.extraction_service import EXTRACTION_FAILED_MESSAGE


def create_journal(client, **overrides):
    payload = {"name": "Journal of Testing", "type": "WOS", "impact_factor": 2.0, "quartile": "Q1"}
    payload.update(overrides)
    r = client.post("/journals", json=payload)
    assert r.status_code == 201
    return r.json()["id"]


def create_publication(client, journal_id, **overrides):
    payload = {"authors": "Silva, A.", "title": "On testing", "year": 2020, "doi": None, "journal_id": journal_id}
    payload.update(overrides)
    r = client.post("/publications", json=payload)
    assert r.status_code == 201
    return r.json()["id"]


def test_health(client):
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json() == {"status": "ok"}


def test_journal_crud_flow(client):
    journal_id = create_journal(client, name="Zeta")
    create_journal(client, name="Alpha", type="SCOPUS")

    r = client.get(f"/journals/{journal_id}")
    assert r.status_code == 200
    assert r.json() == {
        "id": journal_id,
        "name": "Zeta",
        "issn": None,
        "impact_factor": 2.0,
        "quartile": "Q1",
        "type": "WOS",
        "image_url": None,
    }

    assert [j["name"] for j in client.get("/journals").json()] == ["Alpha", "Zeta"]

    r = client.put(f"/journals/{journal_id}", json={"name": "Zeta 2", "type": "SCOPUS"})
    assert r.status_code == 200
    assert r.json() == {"success": True}
    assert client.get(f"/journals/{journal_id}").json()["type"] == "SCOPUS"

    r = client.delete(f"/journals/{journal_id}")
    assert r.status_code == 204
    assert client.delete(f"/journals/{journal_id}").status_code == 404
    assert client.get(f"/journals/{journal_id}").status_code == 404


@pytest.mark.parametrize(
    "payload",
    [
        {"name": "X", "type": "IEEE"},
        {"name": "", "type": "WOS"},
        {"type": "WOS"},
        {"name": "X"},
        {"name": "X", "type": "WOS", "impact_factor": "lots"},
    ],
)
def test_invalid_journal_is_400(client, payload):
    r = client.post("/journals", json=payload)
    assert r.status_code == 400
    assert client.get("/journals").json() == []


def test_update_missing_journal_is_404(client):
    r = client.put("/journals/999", json={"name": "X", "type": "WOS"})
    assert r.status_code == 404


def test_delete_journal_with_publications_is_409(client):
    journal_id = create_journal(client)
    create_publication(client, journal_id)

    r = client.delete(f"/journals/{journal_id}")
    assert r.status_code == 409
    assert client.get(f"/journals/{journal_id}").status_code == 200


def test_publication_crud_flow(client):
    journal_id = create_journal(client)
    publication_id = create_publication(client, str(journal_id), doi="10.1/abc")

    r = client.get(f"/publications/{publication_id}")
    assert r.status_code == 200
    assert r.json() == {
        "id": publication_id,
        "authors": "Silva, A.",
        "title": "On testing",
        "year": 2020,
        "doi": "10.1/abc",
        "journal_id": journal_id,
    }

    r = client.put(
        f"/publications/{publication_id}",
        json={"authors": "B", "title": "Retitled", "year": 2021, "journal_id": journal_id},
    )
    assert r.status_code == 200
    assert client.get(f"/publications/{publication_id}").json()["doi"] is None

    assert client.delete(f"/publications/{publication_id}").status_code == 204
    assert client.delete(f"/publications/{publication_id}").status_code == 404
    assert client.get(f"/publications/{publication_id}").status_code == 404


@pytest.mark.parametrize(
    "overrides",
    [{"authors": ""}, {"title": None}, {"year": None}, {"year": 2020.7}, {"journal_id": None}, {"journal_id": "abc"}, {"journal_id": 9999}],
)
def test_invalid_publication_is_400(client, overrides):
    journal_id = create_journal(client)
    payload = {"authors": "A", "title": "T", "year": 2020, "journal_id": journal_id}
    payload.update(overrides)

    r = client.post("/publications", json=payload)
    assert r.status_code == 400


def test_publications_list_is_joined_and_sorted(client):
    journal_id = create_journal(client, name="Acta", image_url="https://example.org/a.png")
    create_publication(client, journal_id, title="Beta", year=2019)
    create_publication(client, journal_id, title="Alpha", year=2019)
    create_publication(client, journal_id, title="Gamma", year=2023)

    rows = client.get("/publications_list").json()

    assert [r["title"] for r in rows] == ["Gamma", "Alpha", "Beta"]
    assert rows[0]["journal_name"] == "Acta"
    assert rows[0]["journal_image_url"] == "https://example.org/a.png"
    assert rows[0]["journal_impact_factor"] == 2.0


def test_kpis_endpoint(client):
    wos = create_journal(client, name="W", type="WOS", impact_factor=1.5)
    scopus = create_journal(client, name="S", type="SCOPUS", impact_factor=3.0)
    create_publication(client, wos, year=2020)
    create_publication(client, wos, year=2020)
    create_publication(client, scopus, year=2021)

    r = client.get("/kpis", params={"startYear": 2019, "endYear": 2021})

    assert r.status_code == 200
    assert r.json() == {
        "yearlyBreakdown": [
            {"year": 2021, "wos_count": 0, "scopus_count": 1},
            {"year": 2020, "wos_count": 2, "scopus_count": 0},
        ],
        "rangeTotals": {"totalPapers": 3, "totalImpactFactor": 3.0, "totalCiteScore": 3.0},
    }


def test_kpis_without_bounds_or_with_garbage_bounds(client):
    journal_id = create_journal(client)
    create_publication(client, journal_id, year=1)

    for params in ({}, {"startYear": "", "endYear": "soon"}):
        body = client.get("/kpis", params=params).json()
        assert body["rangeTotals"]["totalPapers"] == 1


def test_kpis_invalid_range_is_400(client):
    r = client.get("/kpis", params={"startYear": 2022, "endYear": 2021})
    assert r.status_code == 400


def test_legacy_api_prefix_is_served(client):
    journal_id = create_journal(client)
    r = client.get(f"/api/journals/{journal_id}")
    assert r.status_code == 200
    assert client.get("/api/kpis").status_code == 200


@patch("api.routers.parsing.parse_publication_text")
def test_parse_publication(mock_parse, client):
    from services.extraction_service import ParsedPublication

    mock_parse.return_value = ParsedPublication(
        authors="A", title="T", year=2024, doi=None, matched_journal_id=None
    )

    r = client.post("/parse_publication", json={"text": "some citation"})

    assert r.status_code == 200
    assert r.json() == {"authors": "A", "title": "T", "year": 2024, "doi": None, "matched_journal_id": None}


def test_parse_publication_empty_text_is_400(client):
    assert client.post("/parse_publication", json={"text": "  "}).status_code == 400
    assert client.post("/parse_publication", json={}).status_code == 400


@patch("api.routers.parsing.parse_publication_text", side_effect=ExtractionFailure(EXTRACTION_FAILED_MESSAGE))
def test_parse_publication_gateway_failure_is_500(mock_parse, client):
    r = client.post("/parse_publication", json={"text": "some citation"})
    assert r.status_code == 500
    assert r.json() == {"detail": EXTRACTION_FAILED_MESSAGE}


@patch("services.extraction_service.generate_json_response")
def test_parse_publication_wrongly_typed_llm_output_is_500(mock_generate, client):
    mock_generate.return_value = {"authors": ["A. Smith", "B. Jones"], "title": "T", "doi": 123}

    r = client.post("/parse_publication", json={"text": "some citation"})

    assert r.status_code == 500
    assert r.json() == {"detail": EXTRACTION_FAILED_MESSAGE}
