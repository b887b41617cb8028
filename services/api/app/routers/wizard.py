from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException
from packages.shared.schemas.wizard_v1 import WizardStepV1, WizardViewV1
from services.api.app.db.deps import get_db
from services.api.app.models.draft import (
    ContactInfo,
    ContactRequest,
    DeliveryRequest,
    QuantityRequest,
    ScheduleRequest,
    TreeAddRequest,
)
from services.api.app.services.cart import (
    LineItemNotFoundError,
    add_stand,
    add_tree,
    add_wreath,
    remove_stand,
    remove_tree,
    remove_wreath,
    set_stand_quantity,
    set_tree_quantity,
    set_wreath_quantity,
    toggle_own_stand,
)
from services.api.app.services.catalog import (
    CatalogItemUnavailableError,
    ScheduleInvalidError,
    build_schedule,
    get_visible_stand,
    get_visible_wreath,
    price_tree,
    select_delivery_option,
)
from services.api.app.services.notify_base import OrderNotifier
from services.api.app.services.notify_factory import get_order_notifier
from services.api.app.services.pricing import totals_view
from services.api.app.services.store import WizardSession, store
from services.api.app.services.submission import (
    DraftIncompleteError,
    OrderSubmissionError,
    submit_order,
)
from services.api.app.services.wizard import (
    STEP_SEQUENCE,
    AlreadySubmittedError,
    StepGateError,
    StepMismatchError,
    WizardError,
    advance,
    can_advance,
    can_go_back,
    go_back,
    next_label,
)
from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)

router = APIRouter()


def _raise_wizard_http_error(e: Exception) -> None:
    if isinstance(e, LineItemNotFoundError):
        raise HTTPException(status_code=404, detail=str(e)) from e

    if isinstance(e, ScheduleInvalidError):
        raise HTTPException(status_code=422, detail=str(e)) from e

    if isinstance(
        e,
        (
            AlreadySubmittedError,
            StepGateError,
            StepMismatchError,
            CatalogItemUnavailableError,
            DraftIncompleteError,
        ),
    ):
        raise HTTPException(status_code=409, detail=str(e)) from e

    if isinstance(e, OrderSubmissionError):
        raise HTTPException(status_code=502, detail=str(e)) from e

    if isinstance(e, WizardError):
        raise HTTPException(status_code=400, detail=str(e)) from e

    logger.exception("Unexpected wizard error", exc_info=e)
    raise HTTPException(status_code=500, detail="Internal Server Error") from e


def _get_session(session_id: str) -> WizardSession:
    session = store.get_session(session_id)
    if session is None:
        raise HTTPException(status_code=404, detail="Wizard session not found")
    return session


def _open_session(session_id: str) -> WizardSession:
    """A session that can still be edited, i.e. one that has not been submitted."""

    session = _get_session(session_id)
    if session.submitted:
        _raise_wizard_http_error(AlreadySubmittedError(session.order_number))
    return session


def _update_draft(session: WizardSession, **changes: object) -> WizardSession:
    return store.update(session, draft=session.draft.model_copy(update=changes))


def _to_view(session: WizardSession) -> WizardViewV1:
    return WizardViewV1(
        session_id=session.session_id,
        step=session.step,
        sequence=list(STEP_SEQUENCE),
        can_go_back=can_go_back(session.step),
        can_go_next=can_advance(session.step, session.draft),
        next_label=next_label(session.step),
        item_count=session.draft.item_count(),
        draft=session.draft.model_dump(mode="json"),
        totals=totals_view(session.draft),
        order_number=session.order_number,
    )


def _resolve_notifier() -> OrderNotifier | None:
    try:
        return get_order_notifier()
    except ValueError:
        logger.exception("Order notifier is misconfigured; new orders will not be announced")
        return None


@router.post("/v1/wizard", response_model=WizardViewV1)
def start_wizard() -> WizardViewV1:
    return _to_view(store.new_session())


@router.get("/v1/wizard/{session_id}", response_model=WizardViewV1)
def get_wizard(session_id: str) -> WizardViewV1:
    return _to_view(_get_session(session_id))


@router.post("/v1/wizard/{session_id}/next", response_model=WizardViewV1)
def next_step(session_id: str) -> WizardViewV1:
    session = _open_session(session_id)

    try:
        step = advance(session.step, session.draft)
    except StepGateError as e:
        logger.info("Wizard %s held at step %s", session_id, session.step.value)
        _raise_wizard_http_error(e)

    return _to_view(store.update(session, step=step))


@router.post("/v1/wizard/{session_id}/back", response_model=WizardViewV1)
def previous_step(session_id: str) -> WizardViewV1:
    session = _open_session(session_id)
    return _to_view(store.update(session, step=go_back(session.step)))


# Trees


@router.post("/v1/wizard/{session_id}/trees", response_model=WizardViewV1)
def add_tree_item(
    session_id: str, payload: TreeAddRequest, db: Session = Depends(get_db)
) -> WizardViewV1:
    session = _open_session(session_id)

    try:
        tree = price_tree(db, payload)
    except Exception as e:
        _raise_wizard_http_error(e)

    return _to_view(_update_draft(session, trees=add_tree(session.draft.trees, tree)))


@router.put("/v1/wizard/{session_id}/trees/{index}", response_model=WizardViewV1)
def set_tree_item_quantity(session_id: str, index: int, payload: QuantityRequest) -> WizardViewV1:
    session = _open_session(session_id)

    try:
        trees = set_tree_quantity(session.draft.trees, index, payload.quantity)
    except Exception as e:
        _raise_wizard_http_error(e)

    return _to_view(_update_draft(session, trees=trees))


@router.delete("/v1/wizard/{session_id}/trees/{index}", response_model=WizardViewV1)
def remove_tree_item(session_id: str, index: int) -> WizardViewV1:
    session = _open_session(session_id)

    try:
        trees = remove_tree(session.draft.trees, index)
    except Exception as e:
        _raise_wizard_http_error(e)

    return _to_view(_update_draft(session, trees=trees))


# Stands


@router.post("/v1/wizard/{session_id}/stands/{stand_id}", response_model=WizardViewV1)
def add_stand_item(session_id: str, stand_id: str, db: Session = Depends(get_db)) -> WizardViewV1:
    session = _open_session(session_id)

    try:
        stand = get_visible_stand(db, stand_id)
    except Exception as e:
        _raise_wizard_http_error(e)

    stands = add_stand(session.draft.stands, stand.id, stand.name, stand.price)
    return _to_view(_update_draft(session, stands=stands))


@router.put("/v1/wizard/{session_id}/stands/{stand_id}", response_model=WizardViewV1)
def set_stand_item_quantity(
    session_id: str, stand_id: str, payload: QuantityRequest, db: Session = Depends(get_db)
) -> WizardViewV1:
    session = _open_session(session_id)

    if payload.quantity <= 0:
        # Removal must work even if the stand was hidden since it was added.
        stands = remove_stand(session.draft.stands, stand_id)
        return _to_view(_update_draft(session, stands=stands))

    try:
        stand = get_visible_stand(db, stand_id)
    except Exception as e:
        _raise_wizard_http_error(e)

    stands = set_stand_quantity(
        session.draft.stands, stand.id, stand.name, stand.price, payload.quantity
    )
    return _to_view(_update_draft(session, stands=stands))


@router.post("/v1/wizard/{session_id}/own-stand", response_model=WizardViewV1)
def toggle_own_stand_item(session_id: str) -> WizardViewV1:
    session = _open_session(session_id)
    return _to_view(_update_draft(session, stands=toggle_own_stand(session.draft.stands)))


# Wreaths


@router.post("/v1/wizard/{session_id}/wreaths/{wreath_id}", response_model=WizardViewV1)
def add_wreath_item(
    session_id: str, wreath_id: str, db: Session = Depends(get_db)
) -> WizardViewV1:
    session = _open_session(session_id)

    try:
        wreath = get_visible_wreath(db, wreath_id)
    except Exception as e:
        _raise_wizard_http_error(e)

    wreaths = add_wreath(
        session.draft.wreaths, wreath.id, wreath.size, wreath.title, wreath.price
    )
    return _to_view(_update_draft(session, wreaths=wreaths))


@router.put("/v1/wizard/{session_id}/wreaths/{wreath_id}", response_model=WizardViewV1)
def set_wreath_item_quantity(
    session_id: str, wreath_id: str, payload: QuantityRequest, db: Session = Depends(get_db)
) -> WizardViewV1:
    session = _open_session(session_id)

    if payload.quantity <= 0:
        wreaths = remove_wreath(session.draft.wreaths, wreath_id)
        return _to_view(_update_draft(session, wreaths=wreaths))

    try:
        wreath = get_visible_wreath(db, wreath_id)
    except Exception as e:
        _raise_wizard_http_error(e)

    wreaths = set_wreath_quantity(
        session.draft.wreaths, wreath.id, wreath.size, wreath.title, wreath.price, payload.quantity
    )
    return _to_view(_update_draft(session, wreaths=wreaths))


# Delivery, schedule, contact


@router.put("/v1/wizard/{session_id}/delivery", response_model=WizardViewV1)
def set_delivery(
    session_id: str, payload: DeliveryRequest, db: Session = Depends(get_db)
) -> WizardViewV1:
    session = _open_session(session_id)

    try:
        delivery = select_delivery_option(db, payload.delivery_option_id)
    except Exception as e:
        _raise_wizard_http_error(e)

    return _to_view(_update_draft(session, delivery=delivery))


@router.put("/v1/wizard/{session_id}/schedule", response_model=WizardViewV1)
def set_schedule(session_id: str, payload: ScheduleRequest) -> WizardViewV1:
    session = _open_session(session_id)

    try:
        schedule = build_schedule(payload.date, payload.time)
    except Exception as e:
        _raise_wizard_http_error(e)

    return _to_view(_update_draft(session, schedule=schedule))


@router.put("/v1/wizard/{session_id}/contact", response_model=WizardViewV1)
def set_contact(session_id: str, payload: ContactRequest) -> WizardViewV1:
    session = _open_session(session_id)
    contact = ContactInfo(**payload.model_dump())
    return _to_view(_update_draft(session, contact=contact))


# Review and submit


@router.post("/v1/wizard/{session_id}/submit", response_model=WizardViewV1)
def submit(session_id: str, db: Session = Depends(get_db)) -> WizardViewV1:
    _get_session(session_id)

    with store.session_lock(session_id):
        # Re-read under the lock; a concurrent submit may have just finished.
        session = _open_session(session_id)

        try:
            if session.step != WizardStepV1.REVIEW:
                raise StepMismatchError(WizardStepV1.REVIEW, session.step)
            result = submit_order(db, session.draft, _resolve_notifier())
        except Exception as e:
            _raise_wizard_http_error(e)

        session = store.update(
            session,
            step=WizardStepV1.CONFIRMATION,
            order_id=result.order_id,
            order_number=result.order_number,
        )
    return _to_view(session)
