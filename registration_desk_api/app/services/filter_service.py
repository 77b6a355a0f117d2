"""
Facet filtering and free‑text search over loaded registrations.

``filter_registrations`` is a pure function of its arguments: the same
records, query, tab and facets always give the same ordered result, so
it is safe to recompute on every keystroke.  Facets combine with a
logical AND and an unset facet never excludes anything, which makes the
order in which facets are applied irrelevant.

Free‑text search runs one case‑insensitive substring predicate over a
fixed set of named field extractors (``SEARCH_FIELDS``).  Add an entry
there to make another field searchable.
"""

from __future__ import annotations

from typing import Callable, Dict, Iterable, List, Optional, Sequence, Tuple

from registration_desk_api.app.schemas.event import EVENT_CATEGORIES, EVENT_SUBCATEGORIES, Event
from registration_desk_api.app.schemas.facets import (
    FacetOptions,
    RegistrationFacets,
    StatusTab,
    TabCounts,
)
from registration_desk_api.app.schemas.registration import PaymentMode, Registration

FieldExtractor = Callable[[Registration], Optional[str]]

SEARCH_FIELDS: Tuple[Tuple[str, FieldExtractor], ...] = (
    ("name", lambda r: r.profile.full_name),
    ("email", lambda r: r.profile.college_email),
    ("phone", lambda r: r.profile.phone),
    ("roll_number", lambda r: r.profile.roll_number),
    ("transaction_id", lambda r: r.transaction_id),
)

# Departments offered even before any registration mentions them.
DEFAULT_DEPARTMENTS = (
    "CO",
    "AIML",
    "DS",
    "ECS",
    "CE",
    "ME",
    "ECE",
    "Electrical",
    "Diploma Pharmacy",
    "Degree Pharmacy",
    "Diploma Architecture",
    "Degree Architecture",
)


def matches_query(record: Registration, query: str) -> bool:
    """True when any searchable field contains ``query`` (case‑insensitive)."""
    needle = (query or "").lower()
    if not needle:
        return True
    for _, extract in SEARCH_FIELDS:
        value = extract(record)
        if value and needle in value.lower():
            return True
    return False


def _equals(expected: str) -> Callable[[Optional[str]], bool]:
    return lambda actual: actual == expected


def _equals_ignore_case(expected: str) -> Callable[[Optional[str]], bool]:
    lowered = expected.lower()
    return lambda actual: actual is not None and actual.lower() == lowered


# facet name -> (extractor, predicate factory)
_FACET_PREDICATES: Dict[str, Tuple[Callable[[Registration], object], Callable[..., Callable]]] = {
    "category": (lambda r: r.event.category, _equals),
    "subcategory": (lambda r: r.event.subcategory, _equals),
    "event_id": (lambda r: r.event_id, _equals),
    "school": (lambda r: r.profile.school, _equals),
    "department": (lambda r: r.profile.department, _equals),
    "program": (lambda r: r.profile.program, _equals),
    "year_of_study": (lambda r: r.profile.year_of_study, _equals),
    "gender": (lambda r: r.profile.gender, _equals_ignore_case),
    "payment_mode": (lambda r: r.payment_mode, _equals),
}


def facet_predicates(facets: Optional[RegistrationFacets]) -> List[Callable[[Registration], bool]]:
    """One predicate per active facet."""
    if facets is None:
        return []
    predicates: List[Callable[[Registration], bool]] = []
    for name, expected in facets.active().items():
        extract, factory = _FACET_PREDICATES[name]
        check = factory(expected)
        predicates.append(lambda record, extract=extract, check=check: check(extract(record)))
    return predicates


def filter_registrations(
    records: Sequence[Registration],
    query: str = "",
    tab: StatusTab | str = StatusTab.ALL,
    facets: Optional[RegistrationFacets] = None,
) -> List[Registration]:
    """Return the records that satisfy the tab, the query and every facet.

    Input order is preserved.  With the ``all`` tab, an empty query and
    no facets the result equals the input.
    """
    tab = StatusTab(tab)
    predicates = facet_predicates(facets)
    result: List[Registration] = []
    for record in records:
        if tab is not StatusTab.ALL and record.status.value != tab.value:
            continue
        if not matches_query(record, query):
            continue
        if all(predicate(record) for predicate in predicates):
            result.append(record)
    return result


def event_options(
    events: Iterable[Event],
    category: Optional[str] = None,
    subcategory: Optional[str] = None,
) -> List[Event]:
    """Events selectable under the current category/subcategory choice."""
    return [
        event
        for event in events
        if (not category or event.category == category)
        and (not subcategory or event.subcategory == subcategory)
    ]


_UNCHANGED = object()


def select_event_scope(
    facets: RegistrationFacets,
    events: Iterable[Event],
    category: object = _UNCHANGED,
    subcategory: object = _UNCHANGED,
) -> RegistrationFacets:
    """Change category and/or subcategory, dropping a stale event choice.

    The selected ``event_id`` survives only if the event is still among
    ``event_options`` for the new category/subcategory.  Pass ``None`` to
    clear a facet; omit an argument to leave it unchanged.
    """
    update: Dict[str, object] = {}
    if category is not _UNCHANGED:
        update["category"] = category or None
    if subcategory is not _UNCHANGED:
        update["subcategory"] = subcategory or None
    scoped = facets.model_copy(update=update)
    if scoped.event_id:
        options = event_options(events, scoped.category, scoped.subcategory)
        if not any(event.id == scoped.event_id for event in options):
            scoped = scoped.model_copy(update={"event_id": None})
    return scoped


def tab_counts(records: Iterable[Registration]) -> TabCounts:
    counts = TabCounts()
    for record in records:
        counts.all += 1
        setattr(counts, record.status.value, getattr(counts, record.status.value) + 1)
    return counts


def _distinct(values: Iterable[Optional[str]]) -> List[str]:
    return sorted({value for value in values if value})


def facet_options(
    records: Sequence[Registration],
    events: Iterable[Event],
    category: Optional[str] = None,
    subcategory: Optional[str] = None,
) -> FacetOptions:
    """Selectable values for each facet, derived from the loaded records."""
    departments = set(DEFAULT_DEPARTMENTS)
    departments.update(r.profile.department for r in records if r.profile.department)
    return FacetOptions(
        categories=list(EVENT_CATEGORIES),
        subcategories=list(EVENT_SUBCATEGORIES),
        events=event_options(events, category, subcategory),
        schools=_distinct(r.profile.school for r in records),
        departments=sorted(departments),
        programs=_distinct(r.profile.program for r in records),
        years_of_study=_distinct(r.profile.year_of_study for r in records),
        genders=_distinct(r.profile.gender for r in records),
        payment_modes=list(PaymentMode),
    )
