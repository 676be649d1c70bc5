# ==============================================================================
# salestarget/reconciler/accumulator.py
# ------------------------------------------------------------------------------
# Adds reconciliation deltas into the persisted monthly achievements.
# ==============================================================================

import logging

from salestarget import db
from salestarget.models import MonthlyAchievement


class AchievementAccumulator:
    """
    Merges deltas into MonthlyAchievement rows. Merging is additive: the same
    period may be fed by several blocks and files within one upload. Callers
    that want a full replacement clear the period first. Committing is left
    to the caller so an upload is one transaction.
    """

    def __init__(self, session=None):
        self.session = session or db.session

    def merge(self, salesperson_id, year, month, own_delta, other_delta):
        # Row lock on databases that support it keeps concurrent merges from losing updates.
        existing = self.session.execute(
            db.select(MonthlyAchievement)
            .filter_by(salesperson_id=salesperson_id, year=year, month=month)
            .with_for_update()
        ).scalar_one_or_none()

        total_delta = own_delta + other_delta

        if existing:
            existing.own_achievement += own_delta
            existing.other_achievement += other_delta
            existing.total_achievement += total_delta
            self.session.flush()
            return existing

        achievement = MonthlyAchievement(
            salesperson_id=salesperson_id, year=year, month=month,
            own_achievement=own_delta, other_achievement=other_delta,
            total_achievement=total_delta,
        )
        self.session.add(achievement)
        self.session.flush()
        return achievement

    def clear_period(self, year, month):
        deleted = self.session.query(MonthlyAchievement).filter_by(year=year, month=month).delete()
        logging.info(f"Cleared {deleted} achievement records for {year}-{month}.")
        return deleted
