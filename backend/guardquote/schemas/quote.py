from datetime import datetime
from decimal import Decimal
from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

QuoteType = Literal["individual", "business"]
QuoteStatus = Literal["pending", "in_review", "quoted", "accepted", "rejected", "expired"]
CompanySize = Literal["1-10", "11-50", "51-200", "201-1000", "1000+"]
Industry = Literal[
    "Technology",
    "Finance",
    "Healthcare",
    "Retail",
    "Manufacturing",
    "Education",
    "Government",
    "Legal",
    "Other",
]
ComplianceAnswer = Literal["yes", "no", "not-sure"]
ComplianceFramework = Literal["HIPAA", "GDPR", "PCI-DSS", "SOX", "CCPA", "ISO/IEC 27001", "Other"]

OTHER = "Other"

INDIVIDUAL_FIELDS = ("coverage_type", "coverage_level", "health_info", "employment_status")
BUSINESS_FIELDS = ("industry", "num_employees", "annual_revenue", "business_info")
TRACK_FIELDS: dict[str, tuple[str, ...]] = {"individual": INDIVIDUAL_FIELDS, "business": BUSINESS_FIELDS}


class HealthInfo(BaseModel):
    """Optional health answers on an individual quote (opt-in)."""
    model_config = ConfigDict(extra="forbid")

    age: Optional[int] = Field(None, ge=0, le=130)
    smoker: Optional[bool] = None
    pre_existing_conditions: list[str] = Field(default_factory=list)
    current_medications: list[str] = Field(default_factory=list)
    notes: Optional[str] = None


class BusinessInfo(BaseModel):
    """Structured answers of the business intake form.

    Compliance frameworks only make sense when ``has_compliance`` is ``yes``;
    for ``no`` / ``not-sure`` the framework set and its override are dropped.
    """
    model_config = ConfigDict(extra="forbid")

    company_size: CompanySize
    industry_other: Optional[str] = None
    has_compliance: ComplianceAnswer
    compliance_types: list[ComplianceFramework] = Field(default_factory=list)
    compliance_other: Optional[str] = None
    remote_workforce: bool
    current_solutions: Optional[str] = None
    budget: Decimal = Field(..., gt=0, description="Estimated monthly budget (USD)")
    security_requirements: Optional[str] = None

    @model_validator(mode="before")
    @classmethod
    def _drop_unused_compliance(cls, data: Any) -> Any:
        if isinstance(data, dict) and data.get("has_compliance") != "yes":
            data = {**data, "compliance_types": [], "compliance_other": None}
        return data

    @model_validator(mode="after")
    def _dedupe_frameworks(self) -> "BusinessInfo":
        self.compliance_types = list(dict.fromkeys(self.compliance_types))
        if OTHER not in self.compliance_types:
            self.compliance_other = None
        return self


class IndividualQuoteCreate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    quote_type: Literal["individual"]
    description: Optional[str] = None
    coverage_type: str = Field(..., min_length=1, max_length=64)
    coverage_level: str = Field(..., min_length=1, max_length=64)
    employment_status: str = Field(..., min_length=1, max_length=64)
    health_info: Optional[HealthInfo] = None


class BusinessQuoteCreate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    quote_type: Literal["business"]
    description: Optional[str] = None
    industry: Industry
    num_employees: Optional[int] = Field(None, ge=1)
    annual_revenue: Optional[Decimal] = Field(None, ge=0, max_digits=15, decimal_places=2)
    business_info: BusinessInfo


CREATE_MODELS: dict[str, type[BaseModel]] = {
    "individual": IndividualQuoteCreate,
    "business": BusinessQuoteCreate,
}


class IndividualQuotePatch(BaseModel):
    model_config = ConfigDict(extra="forbid")

    description: Optional[str] = None
    coverage_type: Optional[str] = Field(None, min_length=1, max_length=64)
    coverage_level: Optional[str] = Field(None, min_length=1, max_length=64)
    employment_status: Optional[str] = Field(None, min_length=1, max_length=64)
    health_info: Optional[HealthInfo] = None


class BusinessQuotePatch(BaseModel):
    model_config = ConfigDict(extra="forbid")

    description: Optional[str] = None
    industry: Optional[Industry] = None
    num_employees: Optional[int] = Field(None, ge=1)
    annual_revenue: Optional[Decimal] = Field(None, ge=0, max_digits=15, decimal_places=2)
    business_info: Optional[BusinessInfo] = None


PATCH_MODELS: dict[str, type[BaseModel]] = {
    "individual": IndividualQuotePatch,
    "business": BusinessQuotePatch,
}

# fields that may not be set back to null once a quote exists
REQUIRED_ON_PATCH: dict[str, tuple[str, ...]] = {
    "individual": ("coverage_type", "coverage_level", "employment_status"),
    "business": ("industry", "business_info"),
}


class IntakeRequest(BaseModel):
    applicant_type: Optional[QuoteType] = Field(None, description="Defaults to the caller's user_type")
    answers: dict[str, Any]


class QuoteOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    quote_type: QuoteType
    status: QuoteStatus
    estimated_amount: Optional[Decimal] = None
    description: Optional[str] = None
    coverage_type: Optional[str] = None
    coverage_level: Optional[str] = None
    health_info: Optional[HealthInfo] = None
    employment_status: Optional[str] = None
    industry: Optional[str] = None
    num_employees: Optional[int] = None
    annual_revenue: Optional[Decimal] = None
    business_info: Optional[BusinessInfo] = None
    created_at: datetime
    updated_at: datetime


class QuoteDeleted(BaseModel):
    deleted: int
