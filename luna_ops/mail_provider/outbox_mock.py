"""Development mail sender: appends messages to a JSON outbox file."""

import json
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from luna_ops.mail_provider.models import EmailAddress, OutgoingEmail
from luna_ops.utils.logger import get_logger

logger = get_logger("luna_ops.mail_provider.outbox")


class OutboxMailSender:
    """Mock sender: every message is appended to ``outbox_path`` instead of being delivered."""

    def __init__(self, outbox_path: Path):
        self._outbox_path = outbox_path
        self._lock = threading.Lock()
        logger.info("mail.outbox.init", outbox_path=str(self._outbox_path))

    def _load(self) -> list[dict[str, Any]]:
        if not self._outbox_path.exists():
            return []
        with self._outbox_path.open("r", encoding="utf-8") as f:
            data = json.load(f)
        return data if isinstance(data, list) else data.get("value", [])

    def _save(self, items: list[dict[str, Any]]) -> None:
        self._outbox_path.parent.mkdir(parents=True, exist_ok=True)
        with self._outbox_path.open("w", encoding="utf-8") as f:
            json.dump(items, f, indent=2, default=str)

    def send(self, from_: EmailAddress, to: list[EmailAddress], subject: str, html_body: str) -> None:
        message = OutgoingEmail(from_=from_, to=to, subject=subject, html_body=html_body)
        record = message.model_dump(by_alias=True)
        record["sent_at"] = datetime.now(timezone.utc).isoformat()
        with self._lock:
            items = self._load()
            items.append(record)
            self._save(items)
        logger.info("mail.outbox.written", to=[r.address for r in to], subject=subject, count=len(items))

    def messages(self) -> list[OutgoingEmail]:
        """All messages written so far."""
        with self._lock:
            return [OutgoingEmail.model_validate(m) for m in self._load()]
