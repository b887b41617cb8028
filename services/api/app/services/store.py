from __future__ import annotations

import threading
from dataclasses import dataclass, field, replace
from uuid import uuid4

from packages.shared.schemas.wizard_v1 import WizardStepV1
from services.api.app.models.draft import OrderDraft


@dataclass(frozen=True)
class WizardSession:
    session_id: str
    step: WizardStepV1 = WizardStepV1.TREE
    draft: OrderDraft = field(default_factory=OrderDraft)
    order_id: str | None = None
    order_number: str | None = None

    @property
    def submitted(self) -> bool:
        return self.step == WizardStepV1.CONFIRMATION


class InMemoryStore:
    """Session-local wizard state. Nothing here survives a process restart."""

    def __init__(self) -> None:
        self._sessions: dict[str, WizardSession] = {}
        self._locks: dict[str, threading.Lock] = {}
        self._locks_guard = threading.Lock()

    def new_session(self) -> WizardSession:
        session = WizardSession(session_id=uuid4().hex)
        self._sessions[session.session_id] = session
        return session

    def get_session(self, session_id: str) -> WizardSession | None:
        return self._sessions.get(session_id)

    def session_lock(self, session_id: str) -> threading.Lock:
        """Serializes submits for one session so a double click places one order."""
        with self._locks_guard:
            return self._locks.setdefault(session_id, threading.Lock())

    def update(self, session: WizardSession, **changes: object) -> WizardSession:
        updated = replace(session, **changes)
        self._sessions[updated.session_id] = updated
        return updated


store = InMemoryStore()
