# ==============================================================================
# salestarget/main/utils.py
# ------------------------------------------------------------------------------
# Persistence helpers shared by the API routes and the CLI.
# ==============================================================================

import json
import logging
import os

from flask import current_app

from salestarget import db
from salestarget.models import MonthlyAchievement, MonthlyTarget, Salesperson, UploadRun
from salestarget.reconciler import (ReconciliationConfig, ReconciliationTrace, canonical_name,
                                    extract_return_set, process_sales_grid)
from salestarget.reconciler.accumulator import AchievementAccumulator
from salestarget.reconciler.workbook import validate_upload

# Distinguishes "not passed" from an explicit null
UNSET = object()


def _clean_optional(value):
    return canonical_name(value) or None


def upsert_salesperson(name, brand=UNSET, section=UNSET):
    """
    Finds or creates a salesperson by canonical name. Brand and section are
    only written when passed, so a target upload never wipes a brand.
    """
    normalized_name = canonical_name(name)
    salesperson = Salesperson.query.filter_by(name=normalized_name).first()
    if salesperson is None:
        salesperson = Salesperson(name=normalized_name)
        db.session.add(salesperson)

    if brand is not UNSET:
        salesperson.brand = _clean_optional(brand)
    if section is not UNSET:
        salesperson.section = _clean_optional(section)

    db.session.flush()
    return salesperson


def set_target(name, year, month, target):
    salesperson = upsert_salesperson(name)
    existing = MonthlyTarget.query.filter_by(salesperson_id=salesperson.id, year=year, month=month).first()
    if existing:
        existing.target = target
    else:
        existing = MonthlyTarget(salesperson_id=salesperson.id, year=year, month=month, target=target)
        db.session.add(existing)
    db.session.flush()
    return existing


def load_directory():
    """Canonical name -> Salesperson, the lookup the engine resolves blocks against."""
    return {sp.name: sp for sp in Salesperson.query.all()}


def build_dashboard(year, month):
    """Target versus achievement for every salesperson in one period."""
    rows = []
    for sp in Salesperson.query.order_by(Salesperson.name).all():
        target_row = MonthlyTarget.query.filter_by(salesperson_id=sp.id, year=year, month=month).first()
        achievement = MonthlyAchievement.query.filter_by(salesperson_id=sp.id, year=year, month=month).first()

        target = (target_row.target if target_row else 0) or 0
        total = achievement.total_achievement if achievement else 0

        rows.append({
            'name': sp.name,
            'brand': sp.brand,
            'section': sp.section,
            'target': target,
            'ownAchievement': achievement.own_achievement if achievement else 0,
            'otherAchievement': achievement.other_achievement if achievement else 0,
            'totalAchievement': total,
            'totalPercent': (total / target) * 100 if target > 0 else None,
        })
    return rows


def run_upload(sales_path, returns_path, year, month, clear=True):
    """
    Reconciles an uploaded sales sheet (and optional return sheet) into the
    achievements of one period, in a single transaction.

    Args:
        sales_path (str): Path of the sales workbook.
        returns_path (str or None): Path of the return workbook.
        clear (bool): Delete the period's achievements first, so the upload
            replaces rather than adds.

    Returns:
        ReconciliationReport

    Raises:
        ValueError: If a workbook cannot be read. Nothing is changed in that case.
    """
    grids, errors = validate_upload(sales_path, returns_path)
    if errors:
        raise ValueError("; ".join(errors))

    config = ReconciliationConfig.load()
    trace = ReconciliationTrace(enabled=current_app.config.get('RECONCILIATION_TRACE', False))
    accumulator = AchievementAccumulator()

    try:
        if clear:
            accumulator.clear_period(year, month)

        return_set = set()
        if grids['returns'] is not None:
            return_set = extract_return_set(grids['returns'], config.RETURN_REF_COLUMN_PREFIX,
                                            config.INVOICE_MARKER_CHARS)

        report = process_sales_grid(grids['sales'], year, month, load_directory(), accumulator,
                                    return_set, config=config, trace=trace)

        db.session.add(UploadRun(
            sales_filename=os.path.basename(sales_path),
            returns_filename=os.path.basename(returns_path) if returns_path else None,
            year=year, month=month,
            returned_invoice_count=len(return_set),
            results_json=json.dumps(report.to_dict()),
        ))
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise

    logging.info(f"Upload for {year}-{month} committed: {len(report.deltas)} salespersons updated.")
    return report
