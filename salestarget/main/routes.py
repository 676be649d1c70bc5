# ==============================================================================
# salestarget/main/routes.py
# ------------------------------------------------------------------------------
# JSON API for salespersons, targets, sales uploads and the dashboard.
# ==============================================================================

import os
import uuid

from flask import current_app, jsonify, request
from werkzeug.utils import secure_filename

from salestarget import db
from salestarget.main import bp
from salestarget.main.forms import PeriodForm, SalespersonForm, TargetForm, UploadSalesForm
from salestarget.main.utils import (UNSET, build_dashboard, run_upload, set_target,
                                    upsert_salesperson)
from salestarget.models import Salesperson
from salestarget.reconciler import canonical_name, to_number

# --- Helper Functions ---


def allowed_file(filename):
    """Checks if the file extension is allowed based on the app config."""
    return '.' in filename and \
        os.path.splitext(filename)[1].lower() in current_app.config['ALLOWED_EXTENSIONS']


def _payload():
    return request.get_json(silent=True) or request.form.to_dict()


def _form_error(form):
    first = next(iter(form.errors.values()))[0]
    return jsonify({'error': first, 'fields': form.errors}), 400


def _save_upload(storage):
    filename = secure_filename(storage.filename) or 'upload.xlsx'
    os.makedirs(current_app.config['UPLOAD_FOLDER'], exist_ok=True)
    filepath = os.path.join(current_app.config['UPLOAD_FOLDER'], f"{uuid.uuid4().hex}_{filename}")
    storage.save(filepath)
    return filepath


# --- Salespersons ---

@bp.route('/salespersons', methods=['POST'])
def create_salesperson():
    form = SalespersonForm()
    if not form.validate_on_submit():
        return _form_error(form)
    payload = _payload()
    sp = upsert_salesperson(
        form.name.data,
        brand=payload.get('brand') if 'brand' in payload else UNSET,
        section=payload.get('section') if 'section' in payload else UNSET,
    )
    db.session.commit()
    return jsonify(sp.to_dict())


@bp.route('/salespersons/bulk', methods=['POST'])
def bulk_update_salespersons():
    """Overwrites brand and section of existing salespersons, found by id or name."""
    items = (request.get_json(silent=True) or {}).get('salespersons')
    if not isinstance(items, list):
        return jsonify({'error': 'salespersons array is required'}), 400

    for item in items:
        if not isinstance(item, dict):
            continue
        sp = None
        if item.get('id'):
            sp = db.session.get(Salesperson, item['id'])
        elif item.get('name'):
            sp = Salesperson.query.filter_by(name=canonical_name(item['name'])).first()
        if sp is None:
            continue
        sp.brand = canonical_name(item.get('brand')) or None
        sp.section = canonical_name(item.get('section')) or None

    db.session.commit()
    return jsonify([sp.to_dict() for sp in Salesperson.query.order_by(Salesperson.name).all()])


@bp.route('/salespersons', methods=['GET'])
def list_salespersons():
    return jsonify([sp.to_dict() for sp in Salesperson.query.order_by(Salesperson.name).all()])


# --- Targets ---

@bp.route('/targets', methods=['POST'])
def create_target():
    form = TargetForm()
    if not form.validate_on_submit():
        return _form_error(form)
    set_target(form.name.data, form.year.data, form.month.data, form.target.data or 0)
    db.session.commit()
    return jsonify({'ok': True})


@bp.route('/targets/bulk', methods=['POST'])
def bulk_set_targets():
    form = PeriodForm()
    if not form.validate_on_submit():
        return _form_error(form)
    targets = (request.get_json(silent=True) or {}).get('targets')
    if not isinstance(targets, list):
        return jsonify({'error': 'targets array is required'}), 400

    for item in targets:
        if not isinstance(item, dict) or not str(item.get('name') or '').strip():
            continue
        set_target(item['name'], form.year.data, form.month.data, to_number(item.get('target')))

    db.session.commit()
    return jsonify({'ok': True})


# --- Sales Upload ---

@bp.route('/upload-sales', methods=['POST'])
def upload_sales():
    """
    Replaces the achievements of a period with those reconciled from the
    uploaded sales sheet. Invoices listed in the optional return sheet are
    left out.
    """
    form = UploadSalesForm()
    if not form.validate_on_submit():
        return _form_error(form)

    sales_upload = form.sales_upload
    if sales_upload is None:
        return jsonify({'error': 'Sales Excel file is required'}), 400

    returns_upload = form.returns_upload
    for upload in filter(None, (sales_upload, returns_upload)):
        if not allowed_file(upload.filename):
            return jsonify({'error': f"File type not allowed: '{upload.filename}'. Please upload an Excel file."}), 400

    saved = []
    try:
        sales_path = _save_upload(sales_upload)
        saved.append(sales_path)
        returns_path = None
        if returns_upload is not None:
            returns_path = _save_upload(returns_upload)
            saved.append(returns_path)

        report = run_upload(sales_path, returns_path, form.year.data, form.month.data)
    except ValueError as e:
        return jsonify({'error': str(e)}), 400
    except Exception as e:
        current_app.logger.error(f"Sales upload failed: {e}", exc_info=True)
        return jsonify({'error': str(e)}), 500
    finally:
        for path in saved:
            if os.path.exists(path):
                os.remove(path)

    body = report.to_dict()
    body.update({'ok': True, 'message': 'Sales processed successfully (returns used to skip invoices)'})
    return jsonify(body)


# --- Dashboard ---

@bp.route('/dashboard', methods=['GET'])
def dashboard():
    form = PeriodForm(formdata=request.args)
    if not form.validate():
        return jsonify({'error': 'year and month query parameters are required', 'fields': form.errors}), 400
    return jsonify(build_dashboard(form.year.data, form.month.data))
