"""App settings consumed by the booking core: rental packages and high seasons."""
from __future__ import annotations

import copy
from datetime import datetime

from rentdesk.models.vehicle import HighSeason
from rentdesk.services.common import _store, repo, time_based_id
from rentdesk.utils.constants import Collection, DEFAULT_SETTINGS, DATE_FMT
from rentdesk.utils.numbers import parse_amount


class SettingsService:

    @staticmethod
    def settings(store=None) -> dict:
        """Stored settings layered over the defaults (missing keys fall back)."""
        st = store or _store()
        merged = copy.deepcopy(DEFAULT_SETTINGS)
        merged.update(st.get(Collection.SETTINGS, {}) or {})
        return merged

    @staticmethod
    def update(changes: dict, store=None) -> dict:
        st = store or _store()
        current = SettingsService.settings(st)
        current.update(changes or {})
        st.set(Collection.SETTINGS, current)
        return current

    @staticmethod
    def rental_packages(store=None) -> list[str]:
        return list(SettingsService.settings(store).get("rental_packages") or [])

    @staticmethod
    def default_package(store=None) -> str:
        """First configured package, or '' when none are configured."""
        packages = SettingsService.rental_packages(store)
        return packages[0] if packages else ""

    @staticmethod
    def set_rental_packages(packages, store=None):
        cleaned = [p.strip() for p in (packages or []) if p and p.strip()]
        if not cleaned:
            return False, "At least one rental package is required"
        SettingsService.update({"rental_packages": cleaned}, store)
        return True, "Rental packages updated"

    # --------------- High seasons ---------------
    @staticmethod
    def high_seasons(store=None) -> list[HighSeason]:
        return [HighSeason.from_dict(d) for d in repo(Collection.HIGH_SEASONS, store).list()]

    @staticmethod
    def add_high_season(name: str, start_date: str, end_date: str, price_increase, store=None):
        """
        Returns:
            (ok: bool, message: str, season_id: Optional[str])
        """
        try:
            d1 = datetime.strptime((start_date or "").strip(), DATE_FMT).date()
            d2 = datetime.strptime((end_date or "").strip(), DATE_FMT).date()
        except ValueError:
            return False, "Invalid dates (YYYY-MM-DD)", None
        if d2 < d1:
            return False, "End date cannot be before start date", None

        r = repo(Collection.HIGH_SEASONS, store)
        season = HighSeason(
            id=time_based_id([str(s.get("id")) for s in r.list()], prefix="hs-"),
            name=(name or "").strip() or "High Season",
            start_date=d1.isoformat(),
            end_date=d2.isoformat(),
            price_increase=parse_amount(price_increase),
        )
        r.upsert(season.to_dict(), prepend=False)
        return True, "High season added", season.id

    @staticmethod
    def delete_high_season(season_id: str, store=None):
        ok = repo(Collection.HIGH_SEASONS, store).delete(season_id)
        return ok, "High season deleted" if ok else "High season not found"
