"""Maker-checker state machine shared by balance entries and transactions."""

import structlog

from fxposition.domain.entities import Actor, ApprovalStatus, Role
from fxposition.domain.errors import (
    PermissionDeniedError,
    StateConflictError,
    illegal_transition,
)

logger = structlog.get_logger(__name__)

ALLOWED_TRANSITIONS: dict[ApprovalStatus, frozenset[ApprovalStatus]] = {
    ApprovalStatus.DRAFT: frozenset({ApprovalStatus.SUBMITTED}),
    ApprovalStatus.SUBMITTED: frozenset(
        {ApprovalStatus.AUTHORIZED, ApprovalStatus.REJECTED}
    ),
    ApprovalStatus.AUTHORIZED: frozenset(),
    ApprovalStatus.REJECTED: frozenset(),
}

EDITABLE_STATUSES = frozenset({ApprovalStatus.DRAFT, ApprovalStatus.SUBMITTED})


def has_authorizer_privilege(actor: Actor) -> bool:
    """Return True if the actor may authorize or reject."""
    return actor.role in (Role.AUTHORIZER, Role.ADMIN)


def has_override_privilege(actor: Actor) -> bool:
    """Return True if the actor may force-edit authorized records."""
    return actor.role == Role.ADMIN


def initial_status(actor: Actor) -> ApprovalStatus:
    """Status of a record created (or re-saved) by the actor.

    Authorizers skip ahead to authorized; everyone else starts in draft.
    """
    if has_authorizer_privilege(actor):
        return ApprovalStatus.AUTHORIZED
    return ApprovalStatus.DRAFT


def advance(
    current: ApprovalStatus, target: ApprovalStatus, subject: str
) -> ApprovalStatus:
    """Validate a transition and return the target status.

    Args:
        current: Current status of the record
        target: Requested status
        subject: Human readable record name for error messages

    Returns:
        The target status

    Raises:
        StateConflictError: If the transition table does not allow it
    """
    if target not in ALLOWED_TRANSITIONS[current]:
        raise StateConflictError(illegal_transition(subject, current.value, target.value))
    return target


def require_authorizer(actor: Actor, action: str) -> None:
    """Raise PermissionDeniedError unless the actor can authorize."""
    if not has_authorizer_privilege(actor):
        raise PermissionDeniedError(
            f"User {actor.id} ({actor.role.value}) is not allowed to {action}"
        )


def check_editable(status: ApprovalStatus, actor: Actor, subject: str) -> bool:
    """Check whether a record in `status` may be updated or deleted.

    Returns:
        True if the admin override path was used, False otherwise

    Raises:
        PermissionDeniedError: Authorized record and actor is not admin
        StateConflictError: Record is in a terminal non-authorized state
    """
    if status == ApprovalStatus.AUTHORIZED:
        if not has_override_privilege(actor):
            raise PermissionDeniedError(f"Cannot modify authorized {subject}")
        logger.info("admin_override", subject=subject, actor=actor.id)
        return True
    if status not in EDITABLE_STATUSES:
        raise StateConflictError(f"Cannot modify {subject} in status '{status.value}'")
    return False
