"""
Revenue endpoints for API v1.

Both routes narrow the loaded registrations first (status tab and
facets, typically ``payment_mode``) and only then remove duplicate team
rows, so the totals describe exactly the requested slice.
"""

import io

from fastapi import APIRouter, Depends, Query
from fastapi.responses import StreamingResponse

from registration_desk_api.app.api.deps import get_facets, loaded_catalog
from registration_desk_api.app.schemas.facets import RegistrationFacets, StatusTab
from registration_desk_api.app.schemas.revenue import RevenueSummary
from registration_desk_api.app.services.export_service import CSV_MEDIA_TYPE, export_payment_report
from registration_desk_api.app.services.filter_service import filter_registrations
from registration_desk_api.app.services.record_service import RegistrationCatalog
from registration_desk_api.app.services.revenue_service import revenue_summary

router = APIRouter()


@router.get("/", response_model=RevenueSummary)
async def get_revenue(
    status: StatusTab = Query(StatusTab.CONFIRMED, description="Status tab to reconcile; defaults to confirmed"),
    facets: RegistrationFacets = Depends(get_facets),
    catalog: RegistrationCatalog = Depends(loaded_catalog),
) -> RevenueSummary:
    """Revenue for the slice, counting each team once.

    Example: ``GET /revenue?payment_mode=cash`` gives confirmed cash
    revenue.
    """
    records = filter_registrations(catalog.snapshot(), tab=status, facets=facets)
    return revenue_summary(records)


@router.get("/report")
async def get_payment_report(
    status: StatusTab = Query(StatusTab.CONFIRMED),
    facets: RegistrationFacets = Depends(get_facets),
    catalog: RegistrationCatalog = Depends(loaded_catalog),
) -> StreamingResponse:
    """Download the payment report (billable rows plus summaries) as CSV."""
    records = filter_registrations(catalog.snapshot(), tab=status, facets=facets)
    content, filename = export_payment_report(records)
    return StreamingResponse(
        io.BytesIO(content),
        media_type=CSV_MEDIA_TYPE,
        headers={"Content-Disposition": f"attachment; filename={filename}"},
    )
