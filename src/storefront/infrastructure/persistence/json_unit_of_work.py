"""JSON-file-backed UnitOfWork.

A process-wide lock serialises placements; changes are staged in memory
by the repositories and written only on ``commit()``.

Commit runs in two phases.  Every changed file is first written in full
next to its target; only when all of them are on disk are they renamed
into place.  If a rename fails, the files already replaced are restored
from the contents loaded at ``begin()``, so an I/O error never leaves a
promo use recorded without its order.
"""

from __future__ import annotations

import threading
from pathlib import Path

import structlog

from storefront.domain.repository.unit_of_work import UnitOfWork
from storefront.infrastructure.persistence.json_file import StagedRecords
from storefront.infrastructure.persistence.json_order_repository import JsonOrderRepository
from storefront.infrastructure.persistence.json_promo_code_repository import (
    JsonPromoCodeRepository,
)

logger = structlog.get_logger(__name__)

_LOCK = threading.Lock()


class JsonUnitOfWork(UnitOfWork):

    def __init__(
        self,
        orders: JsonOrderRepository,
        promo_codes: JsonPromoCodeRepository,
    ) -> None:
        self.orders = orders
        self.promo_codes = promo_codes

    def commit(self) -> None:
        staged = self.promo_codes.pending_writes() + self.orders.pending_writes()

        written: list[tuple[StagedRecords, Path]] = []
        try:
            for entry in staged:
                written.append((entry, entry.file.write_pending(entry.records)))
        except BaseException:
            for _, tmp_path in written:
                tmp_path.unlink(missing_ok=True)
            raise

        published: list[StagedRecords] = []
        try:
            for entry, tmp_path in written:
                entry.file.publish(tmp_path)
                published.append(entry)
        except BaseException:
            self._restore(published)
            for _, tmp_path in written[len(published):]:
                tmp_path.unlink(missing_ok=True)
            raise

        self.rollback()

    def rollback(self) -> None:
        self.promo_codes.discard()
        self.orders.discard()

    def _begin(self) -> None:
        _LOCK.acquire()
        try:
            self.promo_codes.begin()
            self.orders.begin()
        except BaseException:
            _LOCK.release()
            raise

    def _end(self) -> None:
        _LOCK.release()

    @staticmethod
    def _restore(published: list[StagedRecords]) -> None:
        for entry in published:
            try:
                entry.file.persist(entry.original)
            except OSError:
                logger.exception("commit_restore_failed", path=str(entry.file.path))
                raise
