"""Built-in threshold rules and category metadata.

Bands are inclusive on both ends. Where a boundary is shared by two bands
(e.g. credit utilization of exactly 30%), the better band wins because rules
are evaluated good -> average -> negative.
"""

from __future__ import annotations

from typing import Dict, NamedTuple

from loan_risk.models.enums import CategoryId, Comparator
from loan_risk.models.thresholds import (
    Band,
    CountBucket,
    CountRule,
    LabelRule,
    RangeRule,
    ThresholdCatalog,
)


class CategoryInfo(NamedTuple):
    """Display metadata for one risk category."""

    name: str
    description: str
    traditional_mapping: str


CATEGORY_INFO: Dict[str, CategoryInfo] = {
    CategoryId.CREDITWORTHINESS.value: CategoryInfo(
        name="Creditworthiness Of The Borrower (CWB)",
        description="Credit history and payment performance of the borrower",
        traditional_mapping="Character",
    ),
    CategoryId.FINANCIAL.value: CategoryInfo(
        name="Financial Statements And Ratios (FSR)",
        description="Analysis of financial statements and key financial ratios",
        traditional_mapping="Capital",
    ),
    CategoryId.CASHFLOW.value: CategoryInfo(
        name="Business Cash Flow (BCF)",
        description="Operational cash flow stability and debt service capability",
        traditional_mapping="Capacity",
    ),
    CategoryId.LEGAL.value: CategoryInfo(
        name="Legal And Regulatory Compliance (LRC)",
        description="Legal standing and regulatory compliance status",
        traditional_mapping="Conditions",
    ),
    CategoryId.EQUIPMENT.value: CategoryInfo(
        name="Equipment Value And Type (EVT)",
        description="Valuation and classification of equipment or vehicles",
        traditional_mapping="Collateral",
    ),
    CategoryId.PROPERTY.value: CategoryInfo(
        name="Property Financial Health (PFH)",
        description="Valuation and income health of the real estate being financed",
        traditional_mapping="Collateral",
    ),
}


def category_info(category_id: str) -> CategoryInfo:
    """Return metadata for a category, with a readable fallback for custom ids."""
    info = CATEGORY_INFO.get(category_id)
    if info is not None:
        return info
    return CategoryInfo(name=category_id.replace("_", " ").title(), description="", traditional_mapping="")


# ---------------------------------------------------------------------------
# Data sources
# ---------------------------------------------------------------------------
_BUREAU_SOURCE = "Equifax One Score, PayNet API, Dun & Bradstreet, Experian, LexisNexis"
_BALANCE_SHEET_SOURCE = "OCR of borrower uploaded income statement and balance sheet"
_CASH_FLOW_SOURCE = "OCR of borrower uploaded statement of cash flows"
_COMPLIANCE_SOURCE = "Credit agencies, PitchPoint CRS API or PubRec UCC filings"
_EQUIPMENT_SOURCE = "User input or uploaded purchase order, EquipmentWatch API"
_PROPERTY_SOURCE = "Loan amount from loan application and appraised value"


# ---------------------------------------------------------------------------
# Creditworthiness of the borrower
# ---------------------------------------------------------------------------
_CREDITWORTHINESS_RULES = [
    RangeRule(
        id="credit-score",
        name="Credit Score",
        category=CategoryId.CREDITWORTHINESS.value,
        good=Band(min=720, max=850),
        average=Band(min=650, max=720),
        negative=Band(min=300, max=650),
        data_source=_BUREAU_SOURCE,
    ),
    CountRule(
        id="payment-history",
        name="Payment History (missed payments)",
        category=CategoryId.CREDITWORTHINESS.value,
        good=CountBucket(count=0, comparator=Comparator.EQ),
        average=CountBucket(count=2, comparator=Comparator.LTE),
        negative=CountBucket(count=3, comparator=Comparator.GTE),
        data_source=_BUREAU_SOURCE,
    ),
    RangeRule(
        id="credit-utilization",
        name="Credit Utilization (%)",
        category=CategoryId.CREDITWORTHINESS.value,
        good=Band(min=0, max=30),
        average=Band(min=30, max=50),
        negative=Band(min=50, max=100),
        data_source=_BUREAU_SOURCE,
    ),
    CountRule(
        id="public-records",
        name="Public Records",
        category=CategoryId.CREDITWORTHINESS.value,
        good=CountBucket(count=0, comparator=Comparator.EQ),
        average=CountBucket(count=1, comparator=Comparator.EQ),
        negative=CountBucket(count=2, comparator=Comparator.GTE),
        data_source=_BUREAU_SOURCE,
    ),
    RangeRule(
        id="credit-history-age",
        name="Age of Credit History (years)",
        category=CategoryId.CREDITWORTHINESS.value,
        good=Band(min=10),
        average=Band(min=5, max=10),
        negative=Band(min=0, max=5),
        data_source=_BUREAU_SOURCE,
    ),
]

# ---------------------------------------------------------------------------
# Financial statements and ratios
# ---------------------------------------------------------------------------
_FINANCIAL_RULES = [
    RangeRule(
        id="debt-to-equity",
        name="Debt-to-Equity Ratio",
        category=CategoryId.FINANCIAL.value,
        good=Band(min=0, max=1.0),
        average=Band(min=1.0, max=2.0),
        negative=Band(min=2.0),
        data_source=_BALANCE_SHEET_SOURCE,
    ),
    RangeRule(
        id="current-ratio",
        name="Current Ratio",
        category=CategoryId.FINANCIAL.value,
        good=Band(min=2.0),
        average=Band(min=1.0, max=2.0),
        negative=Band(min=0, max=1.0),
        data_source=_BALANCE_SHEET_SOURCE,
    ),
    RangeRule(
        id="quick-ratio",
        name="Quick Ratio",
        category=CategoryId.FINANCIAL.value,
        good=Band(min=1.0),
        average=Band(min=0.5, max=1.0),
        negative=Band(min=0, max=0.5),
        data_source=_BALANCE_SHEET_SOURCE,
    ),
]

# ---------------------------------------------------------------------------
# Business cash flow
# ---------------------------------------------------------------------------
_CASHFLOW_RULES = [
    RangeRule(
        id="operating-cash-flow",
        name="Operating Cash Flow (annual % change)",
        category=CategoryId.CASHFLOW.value,
        good=Band(min=5),
        average=Band(min=0, max=5),
        negative=Band(max=0),
        data_source=_CASH_FLOW_SOURCE,
    ),
    RangeRule(
        id="cash-flow-coverage",
        name="Cash Flow Coverage Ratio",
        category=CategoryId.CASHFLOW.value,
        good=Band(min=1.5),
        average=Band(min=1.0, max=1.5),
        negative=Band(min=0, max=1.0),
        data_source=_CASH_FLOW_SOURCE,
    ),
]

# ---------------------------------------------------------------------------
# Legal and regulatory compliance
# ---------------------------------------------------------------------------
_LEGAL_RULES = [
    CountRule(
        id="compliance-history",
        name="Compliance History (issues)",
        category=CategoryId.LEGAL.value,
        good=CountBucket(count=0, comparator=Comparator.EQ),
        average=CountBucket(count=1, comparator=Comparator.EQ),
        negative=CountBucket(count=2, comparator=Comparator.GTE),
        data_source=_COMPLIANCE_SOURCE,
    ),
    LabelRule(
        id="regulatory-status",
        name="Regulatory Status",
        category=CategoryId.LEGAL.value,
        good=["compliant"],
        average=["pending", "pending_review"],
        negative=["non_compliant"],
        data_source=_COMPLIANCE_SOURCE,
    ),
]

# ---------------------------------------------------------------------------
# Equipment value and type
# ---------------------------------------------------------------------------
_EQUIPMENT_RULES = [
    RangeRule(
        id="equipment-age",
        name="Equipment Age (years)",
        category=CategoryId.EQUIPMENT.value,
        good=Band(min=0, max=2.66),
        average=Band(min=2.66, max=5.33),
        negative=Band(min=5.33),
        data_source=_EQUIPMENT_SOURCE,
    ),
    LabelRule(
        id="equipment-type",
        name="Equipment Type Demand",
        category=CategoryId.EQUIPMENT.value,
        good=["high", "high_demand", "essential"],
        average=["moderate", "moderate_demand"],
        negative=["low", "low_demand", "niche", "specialized"],
        data_source=_EQUIPMENT_SOURCE,
    ),
]

# ---------------------------------------------------------------------------
# Property financial health
# ---------------------------------------------------------------------------
_PROPERTY_RULES = [
    RangeRule(
        id="ltv-ratio",
        name="Loan-to-Value Ratio (%)",
        category=CategoryId.PROPERTY.value,
        good=Band(min=0, max=65),
        average=Band(min=65, max=75),
        negative=Band(min=75, max=100),
        data_source=_PROPERTY_SOURCE,
    ),
    RangeRule(
        id="debt-service-coverage",
        name="Debt Service Coverage",
        category=CategoryId.PROPERTY.value,
        good=Band(min=1.25),
        average=Band(min=1.1, max=1.25),
        negative=Band(min=0, max=1.1),
        data_source="OCR of borrower income statement for NOI and annual debt service",
    ),
]


DEFAULT_THRESHOLD_CATALOG = ThresholdCatalog.from_rules(
    _CREDITWORTHINESS_RULES
    + _FINANCIAL_RULES
    + _CASHFLOW_RULES
    + _LEGAL_RULES
    + _EQUIPMENT_RULES
    + _PROPERTY_RULES
)


def get_default_threshold_catalog() -> ThresholdCatalog:
    """Return the built-in catalog (immutable, safe to share)."""
    return DEFAULT_THRESHOLD_CATALOG
