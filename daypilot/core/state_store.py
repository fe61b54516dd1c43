# File: daypilot/core/state_store.py
"""
Key-value state used by orchestration code (dismissed risks, sent reminders).
The analysis processors never touch it.
"""

import datetime
import json
from pathlib import Path
from typing import Any, Dict, Optional, Protocol, Set, Tuple

from daypilot.core.config_manager import Config
from daypilot.models import RiskType
from daypilot.utils.logger import setup_logger

logger = setup_logger(__name__)


class StateStore(Protocol):
    """Minimal key-value capability; values must be JSON-serialisable."""

    def get(self, key: str, default: Any = None) -> Any:
        ...

    def set(self, key: str, value: Any) -> None:
        ...

    def delete(self, key: str) -> None:
        ...


class InMemoryStateStore:
    """Dict-backed store for tests and short-lived processes."""

    def __init__(self, initial: Optional[Dict[str, Any]] = None):
        self._data: Dict[str, Any] = dict(initial or {})

    def get(self, key: str, default: Any = None) -> Any:
        return self._data.get(key, default)

    def set(self, key: str, value: Any) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)


class JsonFileStateStore:
    """Store persisted as a single JSON file, rewritten on every change."""

    def __init__(self, filepath: Path = Config.STATE_FILE):
        self.filepath = Path(filepath)
        self._data = self._load()

    def _load(self) -> Dict[str, Any]:
        if not self.filepath.exists():
            return {}
        try:
            with open(self.filepath, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Could not read state file {self.filepath}, starting empty: {e}")
            return {}
        return data if isinstance(data, dict) else {}

    def _save(self) -> None:
        self.filepath.parent.mkdir(parents=True, exist_ok=True)
        with open(self.filepath, 'w', encoding='utf-8') as f:
            json.dump(self._data, f, indent=2, default=str, ensure_ascii=False)

    def get(self, key: str, default: Any = None) -> Any:
        return self._data.get(key, default)

    def set(self, key: str, value: Any) -> None:
        self._data[key] = value
        self._save()

    def delete(self, key: str) -> None:
        if key in self._data:
            del self._data[key]
            self._save()


class RiskDismissals:
    """Remembers which risk types the user dismissed for which day."""

    KEY = 'daypilot-dismissed-risks'

    def __init__(self, store: StateStore):
        self.store = store

    def dismiss(self, day: datetime.date, risk_type: RiskType) -> None:
        dismissed = self.store.get(self.KEY, {})
        types = set(dismissed.get(day.isoformat(), []))
        types.add(risk_type.value)
        dismissed[day.isoformat()] = sorted(types)
        self.store.set(self.KEY, dismissed)

    def dismissed_for(self, day: datetime.date) -> Set[RiskType]:
        dismissed = self.store.get(self.KEY, {})
        return {RiskType(value) for value in dismissed.get(day.isoformat(), [])}


class ReminderLedger:
    """Records sent reminders so each (event, offset) pair goes out once."""

    KEY = 'daypilot-sent-reminders'

    def __init__(self, store: StateStore):
        self.store = store

    def sent_keys(self) -> Set[Tuple[str, int]]:
        return {(r['event_id'], int(r['reminder_minutes'])) for r in self.store.get(self.KEY, [])}

    def record(self, event_id: str, reminder_minutes: int, sent_at: datetime.datetime) -> None:
        entries = list(self.store.get(self.KEY, []))
        entries.append({
            'event_id': event_id,
            'reminder_minutes': reminder_minutes,
            'sent_at': sent_at.isoformat(),
        })
        self.store.set(self.KEY, entries)

    def prune(self, now: datetime.datetime) -> int:
        """Forget entries older than the retention period. Returns how many were dropped."""
        cutoff = now - datetime.timedelta(days=Config.REMINDER_RETENTION_DAYS)
        entries = self.store.get(self.KEY, [])
        kept = [e for e in entries if datetime.datetime.fromisoformat(e['sent_at']) > cutoff]
        if len(kept) != len(entries):
            self.store.set(self.KEY, kept)
        return len(entries) - len(kept)
