"""In-memory session state: the loaded dataset and what users did with it."""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

from zoodiet.logging_config import get_logger
from zoodiet.normalize.records import FeedingRecord
from zoodiet.reports.packing import PackingEntry, PackingItem, PackingStatus, build_packing_list

logger = get_logger(__name__)


class VerificationStatus(str, Enum):
    UNCHECKED = "unchecked"
    OK = "ok"
    NOT_OK = "not-ok"


class UnknownPackingItemError(Exception):
    """Raised when a packing operation names an id not in the current list."""

    def __init__(self, message: str, item_id: str):
        super().__init__(message)
        self.item_id = item_id


@dataclass
class JournalEntry:
    title: str
    message: str
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


@dataclass
class Verification:
    status: VerificationStatus = VerificationStatus.UNCHECKED
    reason: str = ""


@dataclass
class SessionState:
    """
    Everything one session holds between uploads.

    The dataset is replaced wholesale on upload; derived reports are
    recomputed from it on demand and never cached here. Packing statuses,
    journal entries and verification marks are the only user-mutated state.
    """

    records: tuple[FeedingRecord, ...] = ()
    source: str | None = None
    packing: dict[str, PackingItem] = field(default_factory=dict)
    journal: list[JournalEntry] = field(default_factory=list)
    verifications: dict[str, Verification] = field(default_factory=dict)

    @property
    def has_data(self) -> bool:
        return bool(self.records)

    def load_records(self, records: Iterable[FeedingRecord], source: str | None = None) -> None:
        """Replace the dataset and reconcile everything derived from it."""
        self.records = tuple(records)
        self.source = source
        self.verifications.clear()
        self.reconcile_packing(build_packing_list(self.records))
        self.add_journal_entry(
            "Spreadsheet Uploaded",
            f"Successfully loaded {len(self.records)} rows from {source or 'upload'}.",
        )
        logger.info(f"Loaded {len(self.records)} records from {source or 'upload'}")

    def reconcile_packing(self, entries: Iterable[PackingEntry]) -> None:
        """
        Align the packing list with the current packing entries.

        Surviving ids keep their status, new ids start Pending and ids that
        no longer exist are dropped.
        """
        current = self.packing
        self.packing = {
            entry.id: PackingItem(
                id=entry.id,
                status=current[entry.id].status if entry.id in current else PackingStatus.PENDING,
                site_name=entry.site_name,
            )
            for entry in entries
        }
        logger.debug(f"Packing list reconciled: {len(self.packing)} items")

    def _packing_item(self, item_id: str) -> PackingItem:
        try:
            return self.packing[item_id]
        except KeyError:
            raise UnknownPackingItemError(f"Unknown packing item: {item_id}", item_id) from None

    def toggle_packing(self, item_id: str) -> PackingItem:
        """Flip Pending to Packed; anything else goes back to Pending."""
        item = self._packing_item(item_id)
        if item.status is PackingStatus.PENDING:
            item.status = PackingStatus.PACKED
        else:
            item.status = PackingStatus.PENDING
        return item

    def set_packing_status(self, item_id: str, status: PackingStatus) -> PackingItem:
        item = self._packing_item(item_id)
        item.status = status
        return item

    def packing_status(self, item_id: str) -> PackingStatus:
        item = self.packing.get(item_id)
        return item.status if item else PackingStatus.PENDING

    def verify(self, key: str, status: VerificationStatus, reason: str = "") -> Verification:
        """Record a reviewer's mark for one diet block; reasons only stick to not-OK marks."""
        verification = Verification(
            status=status,
            reason=reason if status is VerificationStatus.NOT_OK else "",
        )
        self.verifications[key] = verification
        return verification

    def verification(self, key: str) -> Verification:
        return self.verifications.get(key, Verification())

    def add_journal_entry(self, title: str, message: str) -> JournalEntry:
        entry = JournalEntry(title=title, message=message)
        self.journal.append(entry)
        return entry

    def packing_items(self) -> Sequence[PackingItem]:
        return list(self.packing.values())

    def reset(self) -> None:
        """Drop the dataset and all state derived from it; the journal survives."""
        self.records = ()
        self.source = None
        self.packing.clear()
        self.verifications.clear()
