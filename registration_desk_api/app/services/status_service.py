"""
Guarded status changes for registrations.

Registrations move ``pending -> confirmed``, ``pending -> rejected`` or
``confirmed -> rejected`` (a confirmed registration can still be
reversed, e.g. after a payment clawback).  ``rejected`` is terminal.
Any other request is refused before the store is contacted.

At most one write per registration is in flight at a time.  The
manager keeps a map of registration id -> request token; a second
request for an id already in the map is refused with
``RegistrationBusyError``.  Writes for different ids run concurrently.
The token is removed when the write finishes, whatever the outcome.

The catalog is only updated after the store accepted the write, so a
failed write leaves the previous status in place.
"""

from __future__ import annotations

import logging
import uuid
from typing import Dict, FrozenSet, List, Mapping

from registration_desk_api.app.core.exceptions import (
    ConfirmationRequiredError,
    InvalidTransitionError,
    RegistrationBusyError,
    StatusWriteError,
)
from registration_desk_api.app.schemas.registration import Registration, RegistrationStatus
from registration_desk_api.app.services.record_service import RegistrationCatalog
from registration_desk_api.app.services.store import RegistrationStore

logger = logging.getLogger(__name__)

ALLOWED_TRANSITIONS: Mapping[RegistrationStatus, FrozenSet[RegistrationStatus]] = {
    RegistrationStatus.PENDING: frozenset({RegistrationStatus.CONFIRMED, RegistrationStatus.REJECTED}),
    RegistrationStatus.CONFIRMED: frozenset({RegistrationStatus.REJECTED}),
    RegistrationStatus.REJECTED: frozenset(),
}


def allowed_targets(current: RegistrationStatus | str) -> List[RegistrationStatus]:
    """Statuses reachable from ``current``, in declaration order."""
    reachable = ALLOWED_TRANSITIONS[RegistrationStatus(current)]
    return [status for status in RegistrationStatus if status in reachable]


def is_allowed(current: RegistrationStatus | str, target: RegistrationStatus | str) -> bool:
    return RegistrationStatus(target) in ALLOWED_TRANSITIONS[RegistrationStatus(current)]


def validate_transition(current: RegistrationStatus | str, target: RegistrationStatus | str) -> RegistrationStatus:
    """Return ``target`` as a status or raise ``InvalidTransitionError``."""
    try:
        target_status = RegistrationStatus(target)
    except ValueError:
        raise InvalidTransitionError(RegistrationStatus(current).value, str(target)) from None
    if not is_allowed(current, target_status):
        raise InvalidTransitionError(RegistrationStatus(current).value, target_status.value)
    return target_status


class StatusTransitionManager:
    """Apply operator status changes to the store and the catalog."""

    def __init__(self, catalog: RegistrationCatalog, store: RegistrationStore) -> None:
        self.catalog = catalog
        self.store = store
        self._in_flight: Dict[str, str] = {}

    def is_busy(self, registration_id: str) -> bool:
        return registration_id in self._in_flight

    async def request_status_change(
        self,
        registration_id: str,
        target: RegistrationStatus | str,
        confirmed: bool = True,
    ) -> Registration:
        """Change a registration's status.

        Raises
        ------
        ConfirmationRequiredError
            The operator did not confirm the change.
        RegistrationNotFoundError
            No registration with this id is loaded.
        InvalidTransitionError
            The change is not an allowed transition.
        RegistrationBusyError
            Another change for the same registration is in flight.
        StatusWriteError
            The store did not accept the write; the catalog is unchanged.
        """
        if not confirmed:
            raise ConfirmationRequiredError(
                f"Status change for registration {registration_id} was not confirmed"
            )
        current = self.catalog.get(registration_id)
        target_status = validate_transition(current.status, target)

        if registration_id in self._in_flight:
            raise RegistrationBusyError(registration_id)
        token = uuid.uuid4().hex
        self._in_flight[registration_id] = token
        try:
            try:
                await self.store.update_status(registration_id, target_status.value)
            except StatusWriteError:
                raise
            except Exception as exc:
                logger.error(
                    "Status write for registration %s (%s -> %s) failed: %s",
                    registration_id,
                    current.status.value,
                    target_status.value,
                    exc,
                )
                raise StatusWriteError(registration_id, target_status.value, str(exc)) from exc
            updated = self.catalog.replace_status(registration_id, target_status)
            logger.info(
                "Registration %s status changed %s -> %s",
                registration_id,
                current.status.value,
                target_status.value,
            )
            return updated
        finally:
            if self._in_flight.get(registration_id) == token:
                del self._in_flight[registration_id]
