"""Builders for report export documents used across tests."""


def transactions_report(*groups: str | None) -> bytes:
    """Build a business transaction report; None omits the group attribute."""
    rows = []
    for group in groups:
        if group is None:
            rows.append("<transaction name='no-group'/>")
        else:
            rows.append(f"<transaction group='{group}'/>")
    return (
        "<dashboardreport><data><businesstransactionsdashlet><transactions>"
        + "".join(rows)
        + "</transactions></businesstransactionsdashlet></data></dashboardreport>"
    ).encode()


def chart_report(*measures: str | None) -> bytes:
    """Build a chart report; None omits the measure attribute."""
    rows = []
    for measure in measures:
        if measure is None:
            rows.append("<measure color='black'/>")
        else:
            rows.append(f"<measure measure='{measure}'/>")
    return (
        "<dashboardreport><data><chartdashlet><measures>"
        + "".join(rows)
        + "</measures></chartdashlet></data></dashboardreport>"
    ).encode()
