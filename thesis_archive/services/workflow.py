"""
Thesis submission workflow.

    pending --approve--> approved
    pending --reject---> rejected

approved and rejected are terminal. A thesis created by staff skips the
queue and starts out approved; a student submission starts out pending.
"""
from typing import Dict, Set

from thesis_archive.core.exceptions import InvalidStatusTransitionError
from thesis_archive.models.thesis import Thesis, ThesisStatus


THESIS_TRANSITIONS: Dict[ThesisStatus, Set[ThesisStatus]] = {
    ThesisStatus.PENDING: {ThesisStatus.APPROVED, ThesisStatus.REJECTED},
    ThesisStatus.APPROVED: set(),
    ThesisStatus.REJECTED: set(),
}

# Initial status by how the row was created
STAFF_CREATE_STATUS = ThesisStatus.APPROVED
SUBMISSION_STATUS = ThesisStatus.PENDING


def can_transition(current: ThesisStatus, target: ThesisStatus) -> bool:
    return target in THESIS_TRANSITIONS.get(current, set())


def transition(thesis: Thesis, target: ThesisStatus) -> Thesis:
    """
    Move ``thesis`` to ``target`` in place.

    Raises InvalidStatusTransitionError and leaves the row untouched when the
    move is not in THESIS_TRANSITIONS.
    """
    current = ThesisStatus(thesis.status)
    if not can_transition(current, target):
        raise InvalidStatusTransitionError(current.value, target.value)
    thesis.status = target
    return thesis


def approve(thesis: Thesis) -> Thesis:
    return transition(thesis, ThesisStatus.APPROVED)


def reject(thesis: Thesis) -> Thesis:
    return transition(thesis, ThesisStatus.REJECTED)
