"""Payload gate in front of every quote write.

Both entry points return a ValidationResult instead of raising: expected input
problems are data, the caller decides how to surface them. Nothing is applied
unless the whole payload is valid.
"""
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Annotated, Any, Mapping

from pydantic import BaseModel, Field, TypeAdapter, ValidationError as PydanticValidationError

from guardquote.core.errors import InvalidTransition
from guardquote.schemas.quote import (
    BusinessInfo,
    BusinessQuoteCreate,
    CREATE_MODELS,
    OTHER,
    PATCH_MODELS,
    REQUIRED_ON_PATCH,
    TRACK_FIELDS,
)
from guardquote.services import quote_status

# system-assigned on creation; client values are ignored
IGNORED_ON_CREATE = ("id", "user_id", "status", "estimated_amount", "created_at", "updated_at")
# repository-owned timestamps a client may echo back
READ_ONLY_ON_UPDATE = ("created_at", "updated_at")
# checked by QuoteService before validation
IMMUTABLE_FIELDS = ("id", "user_id", "quote_type")

_amount = TypeAdapter(Annotated[Decimal, Field(ge=0, max_digits=10, decimal_places=2)])


@dataclass
class ValidationResult:
    errors: dict[str, str] = field(default_factory=dict)
    payload: BaseModel | None = None
    changes: dict[str, Any] = field(default_factory=dict)
    target_status: str | None = None
    refused_transition: tuple[str, str] | None = None

    @property
    def ok(self) -> bool:
        return not self.errors and self.refused_transition is None

    def add(self, name: str, message: str) -> None:
        self.errors.setdefault(name, message)


def pydantic_error_fields(exc: PydanticValidationError) -> dict[str, str]:
    """Flatten pydantic errors into ``{"business_info.budget": "..."}``."""
    out: dict[str, str] = {}
    for err in exc.errors():
        name = ".".join(str(p) for p in err["loc"]) or "__root__"
        out.setdefault(name, err["msg"])
    return out


def is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, tuple, set, frozenset, dict)):
        return not value
    return False


def _foreign_fields(quote_type: str) -> set[str]:
    return {name for other, names in TRACK_FIELDS.items() if other != quote_type for name in names}


def _check_track_exclusive(quote_type: str, data: Mapping[str, Any], result: ValidationResult) -> None:
    for name in sorted(_foreign_fields(quote_type)):
        if data.get(name) is not None:
            other = "business" if quote_type == "individual" else "individual"
            result.add(name, f"only allowed on {other} quotes")


def check_business_info(industry: str | None, info: BusinessInfo, result: ValidationResult) -> BusinessInfo:
    """Apply the conditional overrides of the business form, return normalized info."""
    if industry == OTHER:
        if is_blank(info.industry_other):
            result.add("business_info.industry_other", "required when industry is 'Other'")
    elif info.industry_other is not None:
        info = info.model_copy(update={"industry_other": None})
    if info.has_compliance == "yes":
        if not info.compliance_types:
            result.add("business_info.compliance_types", "select at least one compliance framework")
        elif OTHER in info.compliance_types and is_blank(info.compliance_other):
            result.add("business_info.compliance_other", "required when compliance types include 'Other'")
    return info


def validate_create(data: Any) -> ValidationResult:
    result = ValidationResult()
    if not isinstance(data, Mapping):
        result.add("__root__", "payload must be an object")
        return result
    body = {k: v for k, v in data.items() if k not in IGNORED_ON_CREATE}

    quote_type = body.get("quote_type")
    if is_blank(quote_type):
        result.add("quote_type", "Field required")
        return result
    if quote_type not in CREATE_MODELS:
        result.add("quote_type", f"must be one of {', '.join(CREATE_MODELS)}")
        return result

    _check_track_exclusive(quote_type, body, result)
    foreign = _foreign_fields(quote_type)
    try:
        payload = CREATE_MODELS[quote_type].model_validate({k: v for k, v in body.items() if k not in foreign})
    except PydanticValidationError as exc:
        for name, message in pydantic_error_fields(exc).items():
            result.add(name, message)
        return result

    if isinstance(payload, BusinessQuoteCreate):
        info = check_business_info(payload.industry, payload.business_info, result)
        payload = payload.model_copy(update={"business_info": info})
    if not result.errors:
        result.payload = payload
    return result


def _validate_status(current: Any, body: dict[str, Any], result: ValidationResult) -> None:
    status_requested = "status" in body
    target = body.pop("status", None)
    amount = body.pop("estimated_amount", None)

    if status_requested:
        if target not in quote_status.STATUSES:
            result.add("status", f"must be one of {', '.join(quote_status.STATUSES)}")
        else:
            try:
                moves = quote_status.check_transition(current.status, target)
            except InvalidTransition:
                result.refused_transition = (current.status, target)
                moves = False
            if moves:
                result.target_status = target
                result.changes["status"] = target
                if target not in quote_status.PRICED:
                    result.changes["estimated_amount"] = None

    if result.target_status == quote_status.QUOTED:
        if amount is None:
            result.add("estimated_amount", "required when moving a quote to 'quoted'")
            return
        try:
            result.changes["estimated_amount"] = _amount.validate_python(amount)
        except PydanticValidationError as exc:
            result.add("estimated_amount", exc.errors()[0]["msg"])
    elif amount is not None:
        result.add("estimated_amount", "can only be set together with a move to 'quoted'")


def validate_update(current: Any, data: Any) -> ValidationResult:
    """Validate a partial update against the stored quote ``current``."""
    result = ValidationResult()
    if not isinstance(data, Mapping):
        result.add("__root__", "payload must be an object")
        return result
    body = {k: v for k, v in data.items() if k not in READ_ONLY_ON_UPDATE and k not in IMMUTABLE_FIELDS}
    quote_type = current.quote_type

    _validate_status(current, body, result)
    if not body:
        return result

    _check_track_exclusive(quote_type, body, result)
    foreign = _foreign_fields(quote_type)
    own = {k: v for k, v in body.items() if k not in foreign}
    if current.status not in quote_status.EDITABLE:
        for name in own:
            result.add(name, f"cannot be edited while the quote is '{current.status}'")
        return result

    try:
        patch = PATCH_MODELS[quote_type].model_validate(own)
    except PydanticValidationError as exc:
        for name, message in pydantic_error_fields(exc).items():
            result.add(name, message)
        return result

    for name in REQUIRED_ON_PATCH[quote_type]:
        if name in own and own[name] is None:
            result.add(name, "cannot be cleared")
    for name in patch.model_fields_set:
        result.changes[name] = getattr(patch, name)

    if quote_type == "business" and {"industry", "business_info"} & patch.model_fields_set:
        industry = patch.industry or current.industry
        info = patch.business_info
        if info is None and current.business_info is not None:
            info = BusinessInfo.model_validate(current.business_info)
        if info is not None:
            result.changes["business_info"] = check_business_info(industry, info, result)
    return result
