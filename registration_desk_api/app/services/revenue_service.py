"""
Revenue reconciliation for team and individual registrations.

Group events store a team of N as N registration rows: the leader's
row lists the other N-1 participants in ``team_members`` and each of
those participants also has a row of their own with an empty list.
Only the leader's row is billable.  Roles are derived here on every
call from the rows passed in; nothing about them is stored.

Classification is scoped to one event: a participant listed by a
leader of event A is not a member for event B.  A row whose
participant is not listed by any leader in the given rows counts as an
individual, even if a leader exists outside the slice.  Such a row
cannot be proven to be a duplicate, so it is billed.

Callers filter first (payment mode, status) and reconcile the result;
``compute_revenue`` never looks at status or payment mode itself.
"""

from __future__ import annotations

from collections import defaultdict
from typing import Dict, Iterable, List, Sequence, Set

from registration_desk_api.app.schemas.registration import Registration
from registration_desk_api.app.schemas.revenue import (
    EventRevenue,
    ReconciledRegistration,
    RegistrationRole,
    RevenueSummary,
)

# Label used for rows without a payment mode in revenue breakdowns.
UNSPECIFIED_PAYMENT_MODE = "hybrid"


def _listed_members_by_event(records: Iterable[Registration]) -> Dict[str, Set[str]]:
    listed: Dict[str, Set[str]] = defaultdict(set)
    for record in records:
        if record.team_members:
            listed[record.event_id].update(record.team_member_ids)
    return listed


def classify(records: Sequence[Registration]) -> List[ReconciledRegistration]:
    """Tag each registration as leader, member or individual.

    The result is in input order.  Team size is ``1 + len(team_members)``
    for a leader and 1 otherwise.
    """
    listed = _listed_members_by_event(records)
    reconciled: List[ReconciledRegistration] = []
    for record in records:
        if record.team_members:
            role = RegistrationRole.LEADER
            team_size = 1 + len(record.team_members)
        elif record.profile_id and record.profile_id in listed.get(record.event_id, ()):
            role = RegistrationRole.MEMBER
            team_size = 1
        else:
            role = RegistrationRole.INDIVIDUAL
            team_size = 1
        reconciled.append(ReconciledRegistration(registration=record, role=role, team_size=team_size))
    return reconciled


def billable(records: Sequence[Registration]) -> List[Registration]:
    """Registrations that represent a billable unit, in input order."""
    return [item.registration for item in classify(records) if item.should_count]


def compute_revenue(records: Sequence[Registration]) -> int:
    """Total event fees over the billable registrations."""
    return sum(record.event.fee for record in billable(records))


def revenue_summary(records: Sequence[Registration]) -> RevenueSummary:
    """Revenue total with per payment mode and per event breakdowns."""
    reconciled = classify(records)
    by_mode: Dict[str, int] = {}
    by_event: Dict[str, EventRevenue] = {}
    summary = RevenueSummary(registrations=len(reconciled))

    for item in reconciled:
        if item.role is RegistrationRole.LEADER:
            summary.leaders += 1
        elif item.role is RegistrationRole.MEMBER:
            summary.members += 1
            continue
        else:
            summary.individuals += 1

        record = item.registration
        fee = record.event.fee
        summary.counted += 1
        summary.total_revenue += fee

        mode = record.payment_mode.value if record.payment_mode else UNSPECIFIED_PAYMENT_MODE
        by_mode[mode] = by_mode.get(mode, 0) + fee

        entry = by_event.get(record.event_id)
        if entry is None:
            entry = EventRevenue(event_id=record.event_id, event_name=record.event.name, amount=0)
            by_event[record.event_id] = entry
        entry.amount += fee

    summary.by_payment_mode = by_mode
    # Stable sort keeps first‑seen order between events with equal totals
    summary.by_event = sorted(by_event.values(), key=lambda entry: entry.amount, reverse=True)
    return summary
