from decimal import Decimal

from fastapi.testclient import TestClient

from guardquote.main import app

client = TestClient(app)


def create_quote(headers, payload):
    r = client.post("/quotes", json=payload, headers=headers)
    assert r.status_code == 201, r.text
    return r.json()


def test_requires_authentication(individual_payload):
    assert client.get("/quotes").status_code == 401
    r = client.post("/quotes", json=individual_payload, headers={"Authorization": "Bearer not-a-token"})
    assert r.status_code == 401
    assert r.json()["code"] == "unauthorized"


def test_create_and_get_round_trip(make_user, auth_headers, individual_payload):
    headers = auth_headers(make_user())
    created = create_quote(headers, {**individual_payload, "status": "quoted"})
    assert created["status"] == "pending"
    assert created["estimated_amount"] is None
    assert created["industry"] is None and created["business_info"] is None

    r = client.get(f"/quotes/{created['id']}", headers=headers)
    assert r.status_code == 200
    fetched = r.json()
    for key in ("quote_type", "description", "coverage_type", "coverage_level", "employment_status"):
        assert fetched[key] == individual_payload[key]
    assert fetched["health_info"]["age"] == 41
    assert fetched["created_at"] and fetched["updated_at"]


def test_validation_error_shape(make_user, auth_headers, business_payload):
    headers = auth_headers(make_user())
    business_payload["business_info"]["compliance_types"] = []
    r = client.post("/quotes", json=business_payload, headers=headers)
    assert r.status_code == 422
    body = r.json()
    assert body["code"] == "validation_error"
    assert body["fields"] == ["business_info.compliance_types"]


def test_intake_endpoint(make_user, auth_headers):
    headers = auth_headers(make_user())
    r = client.post("/quotes/intake", json={
        "applicant_type": "business",
        "answers": {
            "companySize": "11-50",
            "industry": "Other",
            "otherIndustry": "Aviation",
            "hasCompliance": "yes",
            "complianceTypes": ["ISO/IEC 27001"],
            "hasRemoteWorkforce": "yes",
            "budget": 1200,
        },
    }, headers=headers)
    assert r.status_code == 201, r.text
    data = r.json()
    assert data["quote_type"] == "business"
    assert data["industry"] == "Other"
    assert data["business_info"]["industry_other"] == "Aviation"
    assert data["coverage_type"] is None


def test_intake_incomplete(make_user, auth_headers):
    headers = auth_headers(make_user())
    r = client.post("/quotes/intake", json={
        "applicant_type": "business",
        "answers": {"companySize": "11-50", "industry": "Other", "hasCompliance": "no", "hasRemoteWorkforce": "no", "budget": 10},
    }, headers=headers)
    assert r.status_code == 422
    assert r.json()["code"] == "incomplete_intake"
    assert r.json()["fields"] == ["other_industry"]


def test_status_flow_over_http(make_user, auth_headers, individual_payload):
    headers = auth_headers(make_user())
    quote = create_quote(headers, individual_payload)
    url = f"/quotes/{quote['id']}"

    r = client.patch(url, json={"status": "accepted"}, headers=headers)
    assert r.status_code == 409
    assert r.json()["code"] == "invalid_transition"

    assert client.patch(url, json={"status": "in_review"}, headers=headers).status_code == 200
    r = client.patch(url, json={"status": "quoted"}, headers=headers)
    assert r.status_code == 422
    r = client.patch(url, json={"status": "quoted", "estimated_amount": 450.00}, headers=headers)
    assert r.status_code == 200, r.text
    assert Decimal(str(r.json()["estimated_amount"])) == Decimal("450.00")

    r = client.post(f"{url}/expire", headers=headers)
    assert r.status_code == 200
    assert r.json()["status"] == "expired"
    assert r.json()["estimated_amount"] is None
    assert client.post(f"{url}/expire", headers=headers).status_code == 200


def test_immutable_quote_type(make_user, auth_headers, individual_payload):
    headers = auth_headers(make_user())
    quote = create_quote(headers, individual_payload)
    r = client.patch(f"/quotes/{quote['id']}", json={"quote_type": "business"}, headers=headers)
    assert r.status_code == 400
    assert r.json()["code"] == "immutable_field"


def test_other_owner_cannot_touch_quote(make_user, auth_headers, individual_payload):
    owner = auth_headers(make_user("a@example.com"))
    other = auth_headers(make_user("b@example.com"))
    quote = create_quote(owner, individual_payload)
    url = f"/quotes/{quote['id']}"

    assert client.get(url, headers=other).status_code == 403
    assert client.patch(url, json={"description": "hijack"}, headers=other).status_code == 403
    assert client.delete(url, headers=other).status_code == 403
    assert client.get("/quotes", headers=other).json() == []

    r = client.get(url, headers=owner)
    assert r.status_code == 200
    assert r.json()["description"] == individual_payload["description"]


def test_list_and_delete(make_user, auth_headers, individual_payload, business_payload):
    headers = auth_headers(make_user())
    first = create_quote(headers, individual_payload)
    second = create_quote(headers, business_payload)
    r = client.get("/quotes", headers=headers)
    assert [q["id"] for q in r.json()] == [first["id"], second["id"]]

    r = client.delete(f"/quotes/{first['id']}", headers=headers)
    assert r.status_code == 200
    assert r.json() == {"deleted": 1}
    r = client.delete(f"/quotes/{first['id']}", headers=headers)
    assert r.json() == {"deleted": 0}
    assert client.get(f"/quotes/{first['id']}", headers=headers).status_code == 404


def test_health():
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json() == {"status": "ok"}


def test_intake_wrong_shape_is_a_structured_error(make_user, auth_headers):
    headers = auth_headers(make_user())
    r = client.post("/quotes/intake", json={
        "applicant_type": "business",
        "answers": {
            "companySize": "11-50",
            "industry": "Retail",
            "hasCompliance": "yes",
            "complianceTypes": 5,
            "hasRemoteWorkforce": "no",
            "budget": 100,
        },
    }, headers=headers)
    assert r.status_code == 422
    assert r.json()["code"] == "validation_error"
    assert r.json()["fields"] == ["compliance_types"]
