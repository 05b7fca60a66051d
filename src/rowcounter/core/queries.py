"""Path-query shapes for each dashboard kind."""

from dataclasses import dataclass
from typing import assert_never

from rowcounter.core.models import DashboardKind

_TRANSACTIONS = "/dashboardreport/data/businesstransactionsdashlet/transactions/transaction"
_MEASURES = "/dashboardreport/data/chartdashlet/measures/measure"

# Chart rows split by another dimension duplicate their parent measure.
_NOT_SPLIT = "[not(contains(@measure, 'split by'))]"


@dataclass(frozen=True)
class ReportLayout:
    """Where the rows of a dashlet live and how they are grouped.

    Attributes:
        rows: Path selecting the qualifying row elements.
        attribute: Attribute holding the composite group identity.
        delimiter: Separator between fields of that attribute.
        label_scope: Path the per-label count runs against.
    """

    rows: str
    attribute: str
    delimiter: str
    label_scope: str

    @property
    def count(self) -> str:
        return f"count({self.rows})"

    @property
    def label_count(self) -> str:
        """Count of elements whose attribute contains ``$label``."""
        return f"count({self.label_scope}[contains(@{self.attribute}, $label)])"


def layout_for(kind: DashboardKind) -> ReportLayout:
    """Return the query layout for a dashboard kind."""
    match kind:
        case DashboardKind.BUSINESS_TRANSACTION:
            return ReportLayout(
                rows=_TRANSACTIONS,
                attribute="group",
                delimiter=";",
                label_scope=_TRANSACTIONS,
            )
        case DashboardKind.CHART:
            return ReportLayout(
                rows=_MEASURES + _NOT_SPLIT,
                attribute="measure",
                delimiter=",",
                label_scope=_MEASURES,
            )
        case _:
            assert_never(kind)
