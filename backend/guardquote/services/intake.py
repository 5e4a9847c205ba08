"""Intake form model.

Turns the raw answers of the individual / business quote forms into one
creation payload. Answer keys are snake_case; the webapp's camelCase names
(``otherIndustry``, ``hasCompliance``...) are accepted as well.
"""
import re
from typing import Any, Mapping

from pydantic import TypeAdapter, ValidationError as PydanticValidationError

from guardquote.core.errors import IncompleteIntake, ValidationError
from guardquote.schemas.quote import (
    BusinessQuoteCreate,
    IndividualQuoteCreate,
    OTHER,
)
from guardquote.services.validation import is_blank, pydantic_error_fields

INDIVIDUAL_REQUIRED = ("coverage_type", "coverage_level", "employment_status")
BUSINESS_REQUIRED = ("company_size", "industry", "has_compliance", "has_remote_workforce", "budget")

_CAMEL = re.compile(r"(?<!^)(?=[A-Z])")
_bool = TypeAdapter(bool)


def normalize_answers(answers: Mapping[str, Any]) -> dict[str, Any]:
    out: dict[str, Any] = {}
    for key, value in answers.items():
        out[_CAMEL.sub("_", str(key)).lower()] = value
    return out


def _text(value: Any) -> str | None:
    if is_blank(value):
        return None
    return str(value).strip()


def _string_set(answers: Mapping[str, Any], name: str) -> list[str]:
    """Checkbox groups arrive as lists/sets, a single box as a plain string."""
    value = answers.get(name)
    if is_blank(value):
        return []
    if isinstance(value, str):
        return [value.strip()]
    if not isinstance(value, (list, tuple, set, frozenset)) or not all(isinstance(v, str) for v in value):
        raise ValidationError(f"'{name}' must be a list of strings", [name])
    return [v.strip() for v in value if not is_blank(v)]


def _missing(answers: Mapping[str, Any], names) -> list[str]:
    return [name for name in names if is_blank(answers.get(name))]


def _flag(answers: Mapping[str, Any], name: str) -> bool:
    value = answers.get(name)
    if is_blank(value):
        return False
    try:
        return _bool.validate_python(value)
    except PydanticValidationError:
        raise ValidationError(f"'{name}' must be a yes/no answer", [name]) from None


def _build(model, data: dict[str, Any]):
    try:
        return model.model_validate(data)
    except PydanticValidationError as exc:
        errors = pydantic_error_fields(exc)
        raise ValidationError("Intake answers are invalid", errors=errors) from exc


def build_individual(answers: Mapping[str, Any]) -> IndividualQuoteCreate:
    missing = _missing(answers, INDIVIDUAL_REQUIRED)
    if missing:
        raise IncompleteIntake(f"Missing answers: {', '.join(missing)}", missing)

    health_info = None
    if _flag(answers, "share_health_info"):
        health_info = {
            "age": answers.get("age") if not is_blank(answers.get("age")) else None,
            "smoker": _flag(answers, "smoker") if not is_blank(answers.get("smoker")) else None,
            "pre_existing_conditions": _string_set(answers, "pre_existing_conditions"),
            "current_medications": _string_set(answers, "current_medications"),
            "notes": _text(answers.get("health_notes")),
        }

    return _build(IndividualQuoteCreate, {
        "quote_type": "individual",
        "description": _text(answers.get("description")),
        "coverage_type": _text(answers.get("coverage_type")),
        "coverage_level": _text(answers.get("coverage_level")),
        "employment_status": _text(answers.get("employment_status")),
        "health_info": health_info,
    })


def build_business(answers: Mapping[str, Any]) -> BusinessQuoteCreate:
    missing = _missing(answers, BUSINESS_REQUIRED)

    industry = _text(answers.get("industry"))
    if industry == OTHER and is_blank(answers.get("other_industry")):
        missing.append("other_industry")

    has_compliance = (_text(answers.get("has_compliance")) or "").lower()
    compliance_types: list[str] = []
    compliance_other = None
    if has_compliance == "yes":
        compliance_types = _string_set(answers, "compliance_types")
        if not compliance_types:
            missing.append("compliance_types")
        elif OTHER in compliance_types:
            compliance_other = _text(answers.get("other_compliance"))
            if compliance_other is None:
                missing.append("other_compliance")
    if missing:
        raise IncompleteIntake(f"Missing answers: {', '.join(missing)}", missing)

    return _build(BusinessQuoteCreate, {
        "quote_type": "business",
        "description": _text(answers.get("description")),
        "industry": industry,
        "num_employees": answers.get("num_employees") if not is_blank(answers.get("num_employees")) else None,
        "annual_revenue": answers.get("annual_revenue") if not is_blank(answers.get("annual_revenue")) else None,
        "business_info": {
            "company_size": _text(answers.get("company_size")),
            "industry_other": _text(answers.get("other_industry")) if industry == OTHER else None,
            "has_compliance": has_compliance,
            "compliance_types": compliance_types,
            "compliance_other": compliance_other,
            "remote_workforce": _flag(answers, "has_remote_workforce"),
            "current_solutions": _text(answers.get("current_solutions")),
            "budget": answers.get("budget"),
            "security_requirements": _text(answers.get("security_requirements")),
        },
    })


def build_quote_payload(applicant_type: str, answers: Mapping[str, Any]) -> IndividualQuoteCreate | BusinessQuoteCreate:
    """Normalize raw form answers for ``applicant_type`` into a creation payload.

    Raises IncompleteIntake when a required or conditionally required answer
    is absent and ValidationError when an answer is present but malformed.
    """
    normalized = normalize_answers(answers)
    if applicant_type == "individual":
        return build_individual(normalized)
    if applicant_type == "business":
        return build_business(normalized)
    raise ValidationError("applicant_type must be 'individual' or 'business'", ["applicant_type"])
