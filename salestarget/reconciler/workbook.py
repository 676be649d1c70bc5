# ==============================================================================
# salestarget/reconciler/workbook.py
# ------------------------------------------------------------------------------
# Reads uploaded workbooks into raw cell grids for the engine.
# ==============================================================================

import pandas as pd


def read_first_sheet(filepath):
    """
    Reads the first sheet of a workbook without interpreting any header row.

    Returns:
        list: One list of cell values per row; empty cells are "".
    """
    df = pd.read_excel(filepath, sheet_name=0, header=None, dtype=object)
    df = df.astype(object).where(df.notna(), '')
    return df.values.tolist()


def validate_upload(sales_path, returns_path=None):
    """
    Loads the sales sheet and, when given, the return sheet.

    Args:
        sales_path (str): Path of the uploaded sales workbook.
        returns_path (str, optional): Path of the uploaded return workbook.

    Returns:
        tuple: A tuple containing:
            - dict: {'sales': grid, 'returns': grid or None} if both files are readable.
            - list: Human-readable error messages otherwise.
    """
    errors = []
    grids = {'sales': None, 'returns': None}

    for key, path in (('sales', sales_path), ('returns', returns_path)):
        if path is None:
            continue
        try:
            grids[key] = read_first_sheet(path)
        except Exception as e:
            errors.append(f"The {key} file is not a readable Excel workbook. Technical error: {e}")

    if errors:
        return None, errors

    if not grids['sales']:
        return None, ["The sales file is empty."]

    return grids, []
