"""Checkout wizard step sequencing.

The wizard walks a fixed linear sequence. Confirmation sits outside the sequence: it is
only reachable by submitting the order and is never left again.
"""

from __future__ import annotations

from packages.shared.schemas.wizard_v1 import WizardStepV1
from services.api.app.models.draft import ContactInfo, OrderDraft

STEP_SEQUENCE: tuple[WizardStepV1, ...] = (
    WizardStepV1.TREE,
    WizardStepV1.STAND,
    WizardStepV1.DELIVERY,
    WizardStepV1.ADDONS,
    WizardStepV1.SCHEDULE,
    WizardStepV1.CONTACT,
    WizardStepV1.REVIEW,
)

REQUIRED_CONTACT_FIELDS: tuple[str, ...] = (
    "first_name",
    "last_name",
    "email",
    "phone",
    "street",
    "city",
    "state",
    "zip",
)


class WizardError(Exception):
    """Base class for checkout wizard errors."""


class StepGateError(WizardError):
    def __init__(self, step: WizardStepV1) -> None:
        super().__init__(f"Cannot continue past step {step.value!r} until it is complete")
        self.step = step


class AlreadySubmittedError(WizardError):
    def __init__(self, order_number: str | None) -> None:
        super().__init__(f"Order already submitted: {order_number}")
        self.order_number = order_number


class StepMismatchError(WizardError):
    def __init__(self, expected: WizardStepV1, actual: WizardStepV1) -> None:
        super().__init__(f"Only allowed at step {expected.value!r}, wizard is at {actual.value!r}")
        self.expected = expected
        self.actual = actual


def go_next(step: WizardStepV1) -> WizardStepV1:
    if step not in STEP_SEQUENCE:
        return step
    idx = STEP_SEQUENCE.index(step)
    if idx < len(STEP_SEQUENCE) - 1:
        return STEP_SEQUENCE[idx + 1]
    return step


def go_back(step: WizardStepV1) -> WizardStepV1:
    if step not in STEP_SEQUENCE:
        return step
    idx = STEP_SEQUENCE.index(step)
    if idx > 0:
        return STEP_SEQUENCE[idx - 1]
    return step


def can_go_back(step: WizardStepV1) -> bool:
    return step in STEP_SEQUENCE and STEP_SEQUENCE.index(step) > 0


def missing_contact_fields(contact: ContactInfo) -> list[str]:
    return [name for name in REQUIRED_CONTACT_FIELDS if not getattr(contact, name).strip()]


def can_advance(step: WizardStepV1, draft: OrderDraft) -> bool:
    if step == WizardStepV1.TREE:
        return len(draft.trees) > 0
    if step == WizardStepV1.DELIVERY:
        return draft.delivery is not None
    if step == WizardStepV1.CONTACT:
        return not missing_contact_fields(draft.contact)
    if step in {
        WizardStepV1.STAND,
        WizardStepV1.ADDONS,
        WizardStepV1.SCHEDULE,
        WizardStepV1.REVIEW,
    }:
        return True
    return False


def advance(step: WizardStepV1, draft: OrderDraft) -> WizardStepV1:
    """Move one step forward, refusing when the current step is incomplete."""

    if not can_advance(step, draft):
        raise StepGateError(step)
    return go_next(step)


def next_label(step: WizardStepV1) -> str:
    if step == WizardStepV1.REVIEW:
        return "Confirm Order"
    return "Next"
