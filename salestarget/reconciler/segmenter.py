# ==============================================================================
# salestarget/reconciler/segmenter.py
# ------------------------------------------------------------------------------
# Splits a sales sheet into per-salesperson row groups.
#
# The export carries one shared header row (first cell "Date") and repeated
# "Salesperson : NAME" marker rows; everything between two markers belongs to
# the named salesperson. Subtotal, branch and period lines are dropped.
# ==============================================================================

import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from .normalize import canonical_name, cell_text
from .schema import (HEADER_FIRST_CELL, META_FIRST_CELLS, META_FIRST_CELL_PREFIXES,
                     SALESPERSON_LABEL)

_SALESPERSON_RE = re.compile(rf'^{SALESPERSON_LABEL}\s*:', re.IGNORECASE)
_META_PREFIX_RE = re.compile(
    r'^(' + '|'.join(META_FIRST_CELL_PREFIXES) + r')\s*:', re.IGNORECASE)


@dataclass
class _SegmentState:
    header: Optional[list] = None
    current: Optional[str] = None
    blocks: Dict[str, List[dict]] = field(default_factory=dict)


def _cell(row, index):
    return cell_text(row[index]) if len(row) > index else ''


def is_meta_row(row):
    """Blank rows, total/grand total lines and branch:/period: banners."""
    if all(cell_text(c) == '' for c in row):
        return True
    first = _cell(row, 0)
    if first.lower() in META_FIRST_CELLS:
        return True
    return bool(_META_PREFIX_RE.match(first))


def is_subtotal_row(row):
    """Salesperson subtotal lines carry their 'Total' label in the second column."""
    return 'total' in _cell(row, 1).lower()


def row_to_record(header, row):
    """Maps a row onto the header labels by position, skipping blank labels."""
    record = {}
    for index, label in enumerate(header):
        label = cell_text(label)
        if not label:
            continue
        record[label] = row[index] if index < len(row) else None
    return record


def _step(state, row, trace=None):
    if is_subtotal_row(row):
        return state

    first = _cell(row, 0)

    if state.header is None and first.lower() == HEADER_FIRST_CELL:
        state.header = list(row)
        if trace:
            trace.emit('header', "Shared header detected", columns=[cell_text(c) for c in row if cell_text(c)])
        return state

    if _SALESPERSON_RE.match(first):
        parts = first.split(':')
        name = canonical_name(parts[1]) if len(parts) > 1 else ''
        state.current = name or None
        if name:
            state.blocks.setdefault(name, [])
            if trace:
                trace.emit('block', "Salesperson block found", salesperson=name)
        return state

    if state.current is None or state.header is None:
        return state

    if is_meta_row(row):
        return state

    state.blocks[state.current].append(row_to_record(state.header, row))
    return state


def segment_rows(rows, trace=None):
    """
    Groups the rows of a sales sheet by salesperson.

    Args:
        rows (iterable): Row-major cell grid, each row a list of raw cell values.
        trace (ReconciliationTrace, optional): Receives header/block events.

    Returns:
        dict: Canonical salesperson name -> list of row dicts keyed by the
        shared header labels, in sheet order. A sheet without a "Date" header
        yields empty lists.
    """
    state = _SegmentState()
    for row in rows:
        state = _step(state, list(row), trace)
    return state.blocks
