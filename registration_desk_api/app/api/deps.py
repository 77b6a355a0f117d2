"""
FastAPI dependencies shared by the endpoint modules.

The catalog, store and status manager are created once per application
in ``main.create_app`` and kept on ``app.state``.
"""

from typing import Optional

from fastapi import Depends, HTTPException, Query, Request, status

from registration_desk_api.app.schemas.facets import RegistrationFacets
from registration_desk_api.app.schemas.registration import PaymentMode
from registration_desk_api.app.services.record_service import RegistrationCatalog
from registration_desk_api.app.services.status_service import StatusTransitionManager
from registration_desk_api.app.services.store import RegistrationStore


def get_catalog(request: Request) -> RegistrationCatalog:
    return request.app.state.catalog


def loaded_catalog(catalog: RegistrationCatalog = Depends(get_catalog)) -> RegistrationCatalog:
    """Refuse to serve anything until a load from the store has succeeded."""
    if catalog.loaded_at is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Registrations have not been loaded from the store",
        )
    return catalog


def get_store(request: Request) -> RegistrationStore:
    return request.app.state.store


def get_transition_manager(request: Request) -> StatusTransitionManager:
    return request.app.state.transition_manager


def get_facets(
    category: Optional[str] = Query(None, description="Event category, e.g. Technical"),
    subcategory: Optional[str] = Query(None, description="Individual or Group"),
    event_id: Optional[str] = Query(None),
    school: Optional[str] = Query(None),
    department: Optional[str] = Query(None),
    program: Optional[str] = Query(None),
    year_of_study: Optional[str] = Query(None),
    gender: Optional[str] = Query(None),
    payment_mode: Optional[PaymentMode] = Query(None),
) -> RegistrationFacets:
    """Collect facet query parameters into a ``RegistrationFacets``."""
    return RegistrationFacets(
        category=category,
        subcategory=subcategory,
        event_id=event_id,
        school=school,
        department=department,
        program=program,
        year_of_study=year_of_study,
        gender=gender,
        payment_mode=payment_mode,
    )
