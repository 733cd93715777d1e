"""Export endpoints: donors, donations and reports as CSV or XLSX downloads."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.orm import Session

from app.api.v1.auth import get_scope
from app.core.database import get_db
from app.schemas.donor import DonorSearchFilters
from app.services.access import AccessScope
from app.services.donations import donations_with_filters
from app.services.donors import search_donors
from app.services.export import (
    CSV_MEDIA_TYPE,
    DONATION_HEADERS,
    DONOR_HEADERS,
    REPORT_CSV_HEADERS,
    XLSX_MEDIA_TYPE,
    ExportFormat,
    ReportType,
    Worksheet,
    blood_type_sheet,
    donation_row,
    donor_row,
    export_filename,
    generate_csv,
    generate_xlsx,
    monthly_sheet,
    overview_sheet,
    report_csv_rows,
)
from app.services.stats import compute_donor_stats, monthly_activity

router = APIRouter()


def _download(worksheets: list[Worksheet], fmt: ExportFormat, prefix: str) -> Response:
    """Single-sheet CSV, or one XLSX sheet per worksheet."""
    filename = export_filename(prefix, fmt)
    headers = {"Content-Disposition": f'attachment; filename="{filename}"'}
    if fmt == "xlsx":
        return Response(
            content=generate_xlsx(worksheets),
            media_type=XLSX_MEDIA_TYPE,
            headers=headers,
        )
    sheet = worksheets[0]
    return Response(
        content=generate_csv(sheet.headers, sheet.rows).encode("utf-8"),
        media_type=CSV_MEDIA_TYPE,
        headers=headers,
    )


@router.get("/donors")
def export_donors(
    scope: Annotated[AccessScope, Depends(get_scope)],
    db: Annotated[Session, Depends(get_db)],
    query: Annotated[str | None, Query()] = None,
    blood_type: Annotated[str | None, Query(alias="bloodType")] = None,
    fmt: Annotated[ExportFormat, Query(alias="format")] = "csv",
) -> Response:
    """Donors visible to the caller (same scoping as search), 20 columns."""
    filters = DonorSearchFilters(
        query=query or None,
        blood_type=None if blood_type in (None, "", "all") else blood_type,
    )
    rows = [donor_row(d) for d in search_donors(db, scope, filters)]
    sheet = Worksheet(name="Doadores", headers=DONOR_HEADERS, rows=rows)
    return _download([sheet], fmt, "doadores")


@router.get("/donations")
def export_donations(
    scope: Annotated[AccessScope, Depends(get_scope)],
    db: Annotated[Session, Depends(get_db)],
    donor_id: Annotated[str | None, Query(alias="donorId")] = None,
    date_from: Annotated[str | None, Query(alias="dateFrom")] = None,
    date_to: Annotated[str | None, Query(alias="dateTo")] = None,
    fmt: Annotated[ExportFormat, Query(alias="format")] = "csv",
) -> Response:
    """Donations visible to the caller, newest donation date first."""
    rows = [
        donation_row(r)
        for r in donations_with_filters(
            db, scope, donor_id or None, date_from or None, date_to or None
        )
    ]
    sheet = Worksheet(name="Doações", headers=DONATION_HEADERS, rows=rows)
    return _download([sheet], fmt, "doacoes")


@router.get("/reports")
def export_report(
    scope: Annotated[AccessScope, Depends(get_scope)],
    db: Annotated[Session, Depends(get_db)],
    report_type: Annotated[ReportType, Query(alias="type")] = "overview",
    fmt: Annotated[ExportFormat, Query(alias="format")] = "csv",
    province_id: Annotated[str | None, Query(alias="provinceId")] = None,
) -> Response:
    """
    overview: general metrics plus blood types; bloodtype: blood types only;
    monthly: new donors and donations for the last 12 months.
    CSV flattens the sheets into Tipo/Item/Valor rows.
    """
    if report_type == "monthly":
        worksheets = [monthly_sheet(monthly_activity(db, scope, province_id or None))]
    else:
        stats = compute_donor_stats(db, scope, province_id or None)
        worksheets = [blood_type_sheet(stats)]
        if report_type == "overview":
            worksheets.insert(0, overview_sheet(stats))

    prefix = f"relatorio_{report_type}"
    if fmt == "xlsx":
        return _download(worksheets, fmt, prefix)
    flat = Worksheet(
        name="Relatório",
        headers=REPORT_CSV_HEADERS,
        rows=report_csv_rows(worksheets),
    )
    return _download([flat], fmt, prefix)
