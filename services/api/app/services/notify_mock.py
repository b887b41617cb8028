from __future__ import annotations

from collections import deque
from uuid import uuid4

from services.api.app.models.notification import OrderNotification
from services.api.app.services.notify_base import NotifyResult

OUTBOX_LIMIT = 100

# Notifications "sent" by the mock notifier, oldest first. Only the most recent are kept.
outbox: deque[OrderNotification] = deque(maxlen=OUTBOX_LIMIT)


class MockOrderNotifier:
    channel = "MOCK"

    def send(self, notification: OrderNotification) -> NotifyResult:
        outbox.append(notification)
        return NotifyResult(channel=self.channel, reference_id=f"mock_{uuid4().hex[:10]}")
