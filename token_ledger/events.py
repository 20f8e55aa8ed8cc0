"""
Event Emitter Module

Append-only log of Transfer and Approval records for external indexers.
Records are hash-chained with SHA-256 for tamper detection, and observers can
subscribe to be notified as each record is appended. The ledger never reads
these records back.
"""

from enum import Enum
from typing import Callable, Dict, List, Any, Optional, Union
from dataclasses import dataclass, field
from datetime import datetime, timezone
import hashlib
import json
import logging
from threading import RLock


class EventKind(Enum):
    """Kinds of ledger events"""
    TRANSFER = "Transfer"
    APPROVAL = "Approval"


@dataclass(frozen=True)
class TransferEvent:
    """Units moved from one address to another (null address for mint/burn)"""
    from_address: str
    to_address: str
    value: int

    @property
    def kind(self) -> EventKind:
        return EventKind.TRANSFER

    def involves(self, address: str) -> bool:
        return address in (self.from_address, self.to_address)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'kind': self.kind.value,
            'from': self.from_address,
            'to': self.to_address,
            'value': str(self.value)
        }


@dataclass(frozen=True)
class ApprovalEvent:
    """An allowance was set; value is the new absolute amount"""
    owner: str
    spender: str
    value: int

    @property
    def kind(self) -> EventKind:
        return EventKind.APPROVAL

    def involves(self, address: str) -> bool:
        return address in (self.owner, self.spender)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'kind': self.kind.value,
            'owner': self.owner,
            'spender': self.spender,
            'value': str(self.value)
        }


LedgerEvent = Union[TransferEvent, ApprovalEvent]


@dataclass
class EventRecord:
    """
    A ledger event as stored in the log, chained to its predecessor
    """
    sequence: int
    event: LedgerEvent
    previous_hash: str
    current_hash: str = ""
    recorded_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def calculate_hash(self) -> str:
        """
        Calculate SHA-256 hash of this record
        Hash includes all fields except current_hash
        """
        hash_data = {
            'sequence': self.sequence,
            'recorded_at': self.recorded_at.isoformat(),
            'previous_hash': self.previous_hash,
            'event': self.event.to_dict()
        }
        json_data = json.dumps(hash_data, sort_keys=True, separators=(',', ':'))
        return hashlib.sha256(json_data.encode('utf-8')).hexdigest()

    def verify_hash(self) -> bool:
        return self.current_hash == self.calculate_hash()

    def to_dict(self) -> Dict[str, Any]:
        return {
            'sequence': self.sequence,
            'recorded_at': self.recorded_at.isoformat(),
            'previous_hash': self.previous_hash,
            'current_hash': self.current_hash,
            'event': self.event.to_dict()
        }


EventHandler = Callable[[EventRecord], None]


class EventEmitter:
    """
    Append-only event log with publish/subscribe notification
    """

    def __init__(self, enable_hashing: bool = True):
        self._records: List[EventRecord] = []
        self._handlers: Dict[EventKind, List[EventHandler]] = {}
        self._global_handlers: List[EventHandler] = []
        self._lock = RLock()
        self.enable_hashing = enable_hashing
        self.logger = logging.getLogger("token_ledger.events")

    def emit(self, event: LedgerEvent) -> EventRecord:
        """Append an event and notify subscribers"""
        with self._lock:
            record = EventRecord(
                sequence=len(self._records),
                event=event,
                previous_hash=self.latest_hash() or ""
            )
            if self.enable_hashing:
                record.current_hash = record.calculate_hash()
            self._records.append(record)
            self.logger.debug(f"Emitted {event.kind.value} #{record.sequence}")
            self._notify(record)
            return record

    def emit_all(self, events: List[LedgerEvent]) -> List[EventRecord]:
        with self._lock:
            return [self.emit(event) for event in events]

    def _notify(self, record: EventRecord) -> None:
        kind = record.event.kind
        for handler in list(self._handlers.get(kind, [])) + list(self._global_handlers):
            try:
                handler(record)
            except Exception as e:
                # Observers never affect the ledger or each other
                self.logger.error(
                    f"Error in event handler {getattr(handler, '__name__', repr(handler))} "
                    f"for {kind.value}: {e}"
                )

    def subscribe(self, kind: EventKind, handler: EventHandler) -> None:
        """Subscribe to a specific event kind"""
        with self._lock:
            self._handlers.setdefault(kind, []).append(handler)

    def subscribe_all(self, handler: EventHandler) -> None:
        """Subscribe to every event kind"""
        with self._lock:
            self._global_handlers.append(handler)

    def unsubscribe(self, kind: EventKind, handler: EventHandler) -> None:
        with self._lock:
            try:
                self._handlers.get(kind, []).remove(handler)
            except ValueError:
                self.logger.warning(
                    f"Handler {getattr(handler, '__name__', repr(handler))} "
                    f"was not subscribed to {kind.value}"
                )

    def unsubscribe_all(self, handler: EventHandler) -> None:
        with self._lock:
            try:
                self._global_handlers.remove(handler)
            except ValueError:
                self.logger.warning(
                    f"Global handler {getattr(handler, '__name__', repr(handler))} was not subscribed"
                )

    def events(self, kind: Optional[EventKind] = None) -> List[LedgerEvent]:
        """Events in emission order, optionally filtered by kind"""
        with self._lock:
            return [r.event for r in self._records if kind is None or r.event.kind == kind]

    def records(self) -> List[EventRecord]:
        with self._lock:
            return list(self._records)

    def events_for(self, address: str) -> List[LedgerEvent]:
        """Events in which an address appears on either side"""
        with self._lock:
            return [r.event for r in self._records if r.event.involves(address)]

    def latest_hash(self) -> Optional[str]:
        with self._lock:
            if not self._records:
                return None
            return self._records[-1].current_hash

    def __len__(self) -> int:
        return len(self._records)

    def verify_integrity(self) -> Dict[str, Any]:
        """
        Verify the integrity of the whole event chain

        Returns:
            Dictionary with integrity check results
        """
        result = {
            'valid': True,
            'total_events': 0,
            'hash_errors': [],
            'chain_breaks': []
        }

        with self._lock:
            records = list(self._records)

        result['total_events'] = len(records)
        if not self.enable_hashing:
            return result

        previous_hash = ""
        for i, record in enumerate(records):
            if not record.verify_hash():
                result['valid'] = False
                result['hash_errors'].append({
                    'sequence': record.sequence,
                    'expected_hash': record.calculate_hash(),
                    'actual_hash': record.current_hash
                })
            if record.previous_hash != previous_hash or record.sequence != i:
                result['valid'] = False
                result['chain_breaks'].append({
                    'sequence': record.sequence,
                    'position': i,
                    'expected_previous_hash': previous_hash,
                    'actual_previous_hash': record.previous_hash
                })
            previous_hash = record.current_hash

        return result
