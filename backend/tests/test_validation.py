from decimal import Decimal
from types import SimpleNamespace

from guardquote.schemas.quote import BusinessInfo, IndividualQuoteCreate
from guardquote.services.validation import validate_create, validate_update


def stored(quote_type="individual", status="pending", **fields):
    base = {
        "quote_type": quote_type,
        "status": status,
        "industry": None,
        "business_info": None,
    }
    base.update(fields)
    return SimpleNamespace(**base)


def test_valid_individual_create(individual_payload):
    result = validate_create(individual_payload)
    assert result.ok
    assert isinstance(result.payload, IndividualQuoteCreate)
    assert result.payload.health_info.pre_existing_conditions == ["asthma"]


def test_create_ignores_system_fields(individual_payload):
    result = validate_create({**individual_payload, "status": "accepted", "estimated_amount": "99", "user_id": 777, "id": 5})
    assert result.ok
    dumped = result.payload.model_dump()
    assert "status" not in dumped
    assert "user_id" not in dumped


def test_create_requires_quote_type(individual_payload):
    individual_payload.pop("quote_type")
    result = validate_create(individual_payload)
    assert not result.ok
    assert list(result.errors) == ["quote_type"]


def test_create_rejects_unknown_quote_type(individual_payload):
    result = validate_create({**individual_payload, "quote_type": "household"})
    assert "quote_type" in result.errors


def test_create_rejects_fields_of_the_other_track(individual_payload):
    result = validate_create({**individual_payload, "industry": "Retail", "num_employees": 3})
    assert not result.ok
    assert {"industry", "num_employees"} <= set(result.errors)


def test_create_allows_null_fields_of_the_other_track(business_payload):
    result = validate_create({**business_payload, "coverage_type": None, "health_info": None})
    assert result.ok


def test_create_numeric_fields_must_parse(business_payload):
    result = validate_create({**business_payload, "num_employees": "many"})
    assert "num_employees" in result.errors


def test_create_rejects_unknown_keys(individual_payload):
    result = validate_create({**individual_payload, "premium_discount": 10})
    assert "premium_discount" in result.errors


def test_create_industry_other_needs_override(business_payload):
    business_payload["industry"] = "Other"
    result = validate_create(business_payload)
    assert "business_info.industry_other" in result.errors

    business_payload["business_info"]["industry_other"] = "Aviation"
    assert validate_create(business_payload).ok


def test_create_compliance_yes_needs_frameworks(business_payload):
    business_payload["business_info"]["compliance_types"] = []
    result = validate_create(business_payload)
    assert "business_info.compliance_types" in result.errors


def test_create_compliance_no_drops_frameworks(business_payload):
    business_payload["business_info"]["has_compliance"] = "no"
    result = validate_create(business_payload)
    assert result.ok
    assert result.payload.business_info.compliance_types == []


def test_update_transition_in_adjacency():
    result = validate_update(stored(status="pending"), {"status": "in_review"})
    assert result.ok
    assert result.target_status == "in_review"
    assert result.changes["status"] == "in_review"


def test_update_refuses_skipping_review():
    result = validate_update(stored(status="pending"), {"status": "accepted"})
    assert not result.ok
    assert result.refused_transition == ("pending", "accepted")


def test_update_unknown_status():
    result = validate_update(stored(), {"status": "archived"})
    assert "status" in result.errors


def test_update_quoted_requires_amount():
    result = validate_update(stored(status="in_review"), {"status": "quoted"})
    assert "estimated_amount" in result.errors


def test_update_quoted_with_amount():
    result = validate_update(stored(status="in_review"), {"status": "quoted", "estimated_amount": "450.00"})
    assert result.ok
    assert result.changes["estimated_amount"] == Decimal("450.00")


def test_update_amount_without_quoting_rejected():
    result = validate_update(stored(status="pending"), {"estimated_amount": 100})
    assert "estimated_amount" in result.errors


def test_update_rejection_clears_amount():
    result = validate_update(stored(status="quoted"), {"status": "rejected"})
    assert result.ok
    assert result.changes == {"status": "rejected", "estimated_amount": None}


def test_update_reexpiry_is_a_noop():
    result = validate_update(stored(status="expired"), {"status": "expired"})
    assert result.ok
    assert result.changes == {}


def test_update_field_edit_while_pending():
    result = validate_update(stored(), {"coverage_level": "basic", "description": None})
    assert result.ok
    assert result.changes == {"coverage_level": "basic", "description": None}


def test_update_field_edit_locked_after_quote():
    result = validate_update(stored(status="quoted"), {"coverage_level": "basic"})
    assert "coverage_level" in result.errors


def test_update_required_field_cannot_be_cleared():
    result = validate_update(stored(), {"employment_status": None})
    assert "employment_status" in result.errors


def test_update_other_track_field_rejected():
    result = validate_update(stored(), {"industry": "Retail"})
    assert "industry" in result.errors


def test_update_industry_change_drops_stale_override():
    info = BusinessInfo(
        company_size="1-10",
        industry_other="Aviation",
        has_compliance="no",
        remote_workforce=False,
        budget=Decimal("100"),
    ).model_dump(mode="json")
    current = stored("business", industry="Other", business_info=info)
    result = validate_update(current, {"industry": "Retail"})
    assert result.ok
    assert result.changes["industry"] == "Retail"
    assert result.changes["business_info"].industry_other is None


def test_update_industry_other_needs_override():
    info = BusinessInfo(company_size="1-10", has_compliance="no", remote_workforce=False, budget=Decimal("100"))
    current = stored("business", industry="Retail", business_info=info.model_dump(mode="json"))
    result = validate_update(current, {"industry": "Other"})
    assert "business_info.industry_other" in result.errors
