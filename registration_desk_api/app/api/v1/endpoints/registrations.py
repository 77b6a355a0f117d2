"""
Registration endpoints for API v1.

These routes let an operator filter the loaded registrations, export
the filtered set as CSV, reload the catalog from the store and change
a registration's status.  Filtering and export work on the catalog's
current snapshot; only the status route and ``/refresh`` reach the
store.
"""

import io
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Path, Query, status
from fastapi.responses import StreamingResponse

from registration_desk_api.app.api.deps import (
    get_catalog,
    get_facets,
    get_store,
    get_transition_manager,
    loaded_catalog,
)
from registration_desk_api.app.core.exceptions import (
    ConfirmationRequiredError,
    FetchError,
    InvalidTransitionError,
    RegistrationBusyError,
    RegistrationNotFoundError,
    StatusWriteError,
)
from registration_desk_api.app.schemas.facets import (
    FacetOptions,
    RegistrationFacets,
    StatusTab,
    TabCounts,
)
from registration_desk_api.app.schemas.registration import (
    Registration,
    RegistrationRead,
    StatusChangeRequest,
)
from registration_desk_api.app.services.export_service import CSV_MEDIA_TYPE, export_csv
from registration_desk_api.app.services.filter_service import (
    facet_options,
    filter_registrations,
    tab_counts,
)
from registration_desk_api.app.services.record_service import RegistrationCatalog
from registration_desk_api.app.services.status_service import (
    StatusTransitionManager,
    allowed_targets,
)
from registration_desk_api.app.services.store import RegistrationStore

router = APIRouter()


def _read(record: Registration) -> RegistrationRead:
    return RegistrationRead(**dict(record), allowed_statuses=allowed_targets(record.status))


@router.get("/", response_model=List[RegistrationRead])
async def list_registrations(
    q: str = Query("", description="Search name, email, phone, roll number or transaction ID"),
    tab: StatusTab = Query(StatusTab.ALL),
    facets: RegistrationFacets = Depends(get_facets),
    catalog: RegistrationCatalog = Depends(loaded_catalog),
) -> List[RegistrationRead]:
    """Registrations matching the search text, status tab and every facet."""
    return [_read(record) for record in filter_registrations(catalog.snapshot(), q, tab, facets)]


@router.get("/counts", response_model=TabCounts)
async def registration_counts(catalog: RegistrationCatalog = Depends(loaded_catalog)) -> TabCounts:
    """Number of registrations per status tab."""
    return tab_counts(catalog.snapshot())


@router.get("/facets", response_model=FacetOptions)
async def registration_facets(
    category: Optional[str] = None,
    subcategory: Optional[str] = None,
    catalog: RegistrationCatalog = Depends(loaded_catalog),
) -> FacetOptions:
    """Selectable facet values.

    The event list is narrowed to the given category and subcategory.
    """
    return facet_options(catalog.snapshot(), catalog.events(), category, subcategory)


@router.get("/export")
async def export_registrations(
    q: str = Query(""),
    tab: StatusTab = Query(StatusTab.ALL),
    facets: RegistrationFacets = Depends(get_facets),
    catalog: RegistrationCatalog = Depends(loaded_catalog),
) -> StreamingResponse:
    """Download the filtered registrations as CSV."""
    records = filter_registrations(catalog.snapshot(), q, tab, facets)
    content, filename = export_csv(records)
    return StreamingResponse(
        io.BytesIO(content),
        media_type=CSV_MEDIA_TYPE,
        headers={"Content-Disposition": f"attachment; filename={filename}"},
    )


@router.post("/refresh", response_model=TabCounts)
async def refresh_registrations(
    catalog: RegistrationCatalog = Depends(get_catalog),
    store: RegistrationStore = Depends(get_store),
) -> TabCounts:
    """Reload the catalog from the store.

    On failure the previously loaded registrations stay in place and
    HTTP 503 is returned.
    """
    try:
        records = await catalog.refresh(store)
    except FetchError as e:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(e)) from e
    return tab_counts(records)


@router.get("/{registration_id}", response_model=RegistrationRead)
async def get_registration(
    registration_id: str = Path(..., description="ID of the registration"),
    catalog: RegistrationCatalog = Depends(loaded_catalog),
) -> RegistrationRead:
    """A single registration with the statuses it may move to."""
    try:
        return _read(catalog.get(registration_id))
    except RegistrationNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e


@router.post("/{registration_id}/status", response_model=RegistrationRead)
async def change_registration_status(
    body: StatusChangeRequest,
    registration_id: str = Path(..., description="ID of the registration"),
    catalog: RegistrationCatalog = Depends(loaded_catalog),
    manager: StatusTransitionManager = Depends(get_transition_manager),
) -> RegistrationRead:
    """Confirm or reject a registration.

    ``confirm`` must be true.  Invalid transitions and concurrent changes
    to the same registration return 409; a failed store write returns
    502 and leaves the status unchanged.
    """
    try:
        updated = await manager.request_status_change(registration_id, body.status, confirmed=body.confirm)
    except ConfirmationRequiredError as e:
        raise HTTPException(status_code=status.HTTP_428_PRECONDITION_REQUIRED, detail=str(e)) from e
    except RegistrationNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    except (InvalidTransitionError, RegistrationBusyError) as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e)) from e
    except StatusWriteError as e:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e)) from e
    return _read(updated)
