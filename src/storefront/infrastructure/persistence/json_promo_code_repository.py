"""JSON-file-backed implementation of PromoCodeRepository.

Outside a unit of work every write goes straight to disk.  Between
``begin()`` and ``discard()`` reads and writes work on an
in-memory copy that only reaches disk when the unit of work commits.
The copy belongs to the calling thread; other threads keep reading the
files.
"""

from __future__ import annotations

import threading
from datetime import datetime, timezone
from decimal import Decimal
from pathlib import Path

from storefront.domain.model.promo_code import PromoCode, PromoType, PromoUsage, normalize_code
from storefront.domain.model.value_objects import Money
from storefront.domain.repository.promo_code_repository import PromoCodeRepository
from storefront.infrastructure.persistence.json_file import JsonFile, StagedRecords


class JsonPromoCodeRepository(PromoCodeRepository):

    def __init__(self, codes_path: Path, usages_path: Path) -> None:
        self._codes_file = JsonFile(codes_path)
        self._usages_file = JsonFile(usages_path)
        self._local = threading.local()

    # --- PromoCodeRepository interface ----------------------------------------

    def get_by_code(self, code: str) -> PromoCode | None:
        wanted = normalize_code(code)
        for raw in self._codes():
            if normalize_code(raw["code"]) == wanted:
                return self._to_domain(raw)
        return None

    def save(self, promo: PromoCode) -> None:
        codes = self._codes()
        for i, raw in enumerate(codes):
            if normalize_code(raw["code"]) == promo.code:
                codes[i] = self._to_raw(promo)
                break
        else:
            codes.append(self._to_raw(promo))
        if self._staged is None:
            self._codes_file.persist(codes)

    def list_usages(self, code: str) -> list[PromoUsage]:
        wanted = normalize_code(code)
        return [
            self._usage_to_domain(raw)
            for raw in self._usages()
            if normalize_code(raw["code"]) == wanted
        ]

    def add_usage(self, usage: PromoUsage) -> None:
        usages = self._usages()
        usages.append(
            {
                "code": usage.code,
                "order_id": usage.order_id,
                "user_id": usage.user_id,
                "email": usage.email,
                "discount_amount": str(usage.discount_amount.amount),
                "currency": usage.discount_amount.currency,
            }
        )
        if self._staged is None:
            self._usages_file.persist(usages)

    # --- Staging (driven by JsonUnitOfWork) -----------------------------------

    def begin(self) -> None:
        self._local.staged = (
            StagedRecords.load(self._codes_file),
            StagedRecords.load(self._usages_file),
        )

    def pending_writes(self) -> list[StagedRecords]:
        return list(self._staged) if self._staged is not None else []

    def discard(self) -> None:
        self._local.staged = None

    @property
    def _staged(self) -> tuple[StagedRecords, StagedRecords] | None:
        return getattr(self._local, "staged", None)

    # --- Serialization --------------------------------------------------------

    def _codes(self) -> list[dict]:
        staged = self._staged
        return staged[0].records if staged is not None else self._codes_file.load()

    def _usages(self) -> list[dict]:
        staged = self._staged
        return staged[1].records if staged is not None else self._usages_file.load()

    @staticmethod
    def _to_raw(promo: PromoCode) -> dict:
        return {
            "code": promo.code,
            "type": promo.type.value,
            "value": str(promo.value),
            "description": promo.description,
            "min_cart_total": _money_or_none(promo.min_cart_total),
            "max_discount_amount": _money_or_none(promo.max_discount_amount),
            "max_uses": promo.max_uses,
            "per_user_limit": promo.per_user_limit,
            "times_used": promo.times_used,
            "active_from": promo.active_from.isoformat() if promo.active_from else None,
            "expires_at": promo.expires_at.isoformat() if promo.expires_at else None,
            "is_active": promo.is_active,
            "requires_account": promo.requires_account,
        }

    @staticmethod
    def _to_domain(raw: dict) -> PromoCode:
        return PromoCode(
            code=normalize_code(raw["code"]),
            type=PromoType(raw["type"]),
            value=Decimal(str(raw["value"])),
            description=raw.get("description", ""),
            min_cart_total=_parse_money(raw.get("min_cart_total")),
            max_discount_amount=_parse_money(raw.get("max_discount_amount")),
            max_uses=raw.get("max_uses"),
            per_user_limit=raw.get("per_user_limit"),
            times_used=raw.get("times_used", 0),
            active_from=_parse_datetime(raw.get("active_from")),
            expires_at=_parse_datetime(raw.get("expires_at")),
            is_active=raw.get("is_active", True),
            requires_account=raw.get("requires_account", False),
        )

    @staticmethod
    def _usage_to_domain(raw: dict) -> PromoUsage:
        return PromoUsage(
            code=normalize_code(raw["code"]),
            order_id=raw["order_id"],
            user_id=raw.get("user_id"),
            email=raw.get("email"),
            discount_amount=Money(Decimal(raw["discount_amount"]), raw.get("currency", "EUR")),
        )


def _money_or_none(money: Money | None) -> str | None:
    return str(money.amount) if money is not None else None


def _parse_money(raw: str | None) -> Money | None:
    return Money.of(raw) if raw is not None else None


def _parse_datetime(raw: str | None) -> datetime | None:
    if not raw:
        return None
    parsed = datetime.fromisoformat(raw)
    # Naive timestamps in the file are UTC.
    return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)
