import json
import logging

from salestarget import db
from salestarget.models import AppSetting
from salestarget.reconciler.schema import (DEFAULT_FINANCE_CUSTOMERS, DEFAULT_INVOICE_MARKER_CHARS,
                                           DEFAULT_RETURN_REF_COLUMN_PREFIX, DEFAULT_SPARES_PREFIX)

DEFAULT_SETTINGS = {
    # key: [value, description, value_type]
    'FINANCE_CUSTOMERS': [json.dumps(DEFAULT_FINANCE_CUSTOMERS),
                          'Financiers exempt from the Net Invoice / Amount Realised mismatch rule (JSON list)', 'json'],
    'SPARES_PREFIX': [DEFAULT_SPARES_PREFIX, 'Item/Model prefix marking spare-part lines', 'string'],
    'INVOICE_MARKER_CHARS': [DEFAULT_INVOICE_MARKER_CHARS, 'Trailing characters stripped from invoice numbers', 'string'],
    'RETURN_REF_COLUMN_PREFIX': [DEFAULT_RETURN_REF_COLUMN_PREFIX, 'Header prefix of the bill number column in return files', 'string'],
}


def seed_data():
    """Populates the database with default settings."""
    for key, data in DEFAULT_SETTINGS.items():
        setting = AppSetting.query.filter_by(key=key).first()
        if not setting:  # Only add if it doesn't exist
            setting = AppSetting(key=key, value=data[0], description=data[1], value_type=data[2])
            db.session.add(setting)
            logging.info(f'Seeding setting: {key}')

    db.session.commit()
    logging.info('Seeding complete.')
