# tests/conftest.py

import pytest

from config import Config


class TestConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    WTF_CSRF_ENABLED = False
    RECONCILIATION_TRACE = True


@pytest.fixture
def app_with_db(tmp_path):
    """
    Creates a new app instance with an empty in-memory database and yields
    it within an application context.
    """
    from salestarget import create_app, db
    from salestarget.reconciler import ReconciliationConfig

    TestConfig.UPLOAD_FOLDER = str(tmp_path / "uploads")
    app = create_app(TestConfig)
    ReconciliationConfig.reset()

    with app.app_context():
        db.create_all()
        yield app  # The tests will run here
        db.session.remove()
        db.drop_all()
    ReconciliationConfig.reset()


@pytest.fixture
def client(app_with_db):
    return app_with_db.test_client()


@pytest.fixture
def sales_grid():
    """A sales export with two salesperson blocks, subtotal lines and a continuation row."""
    header = ["Date", "Invoice No.", "Customer", "Item/Model", "Brand", "Net Amount",
              "Invoice Value", "(-) CASH DISCOUNT", "Net Invoice", "Amount Realised"]
    return [
        ["Branch : MAIN", "", "", "", "", "", "", "", "", ""],
        ["Period : 01-11-2025 to 30-11-2025", "", "", "", "", "", "", "", "", ""],
        header,
        ["Salesperson : Ravi", "", "", "", "", "", "", "", "", ""],
        ["01-11-2025", "GI/100*", "Walk In", "VIDEUM X200", "VIDEUM", "5,000", "5,200", "0", "5,200", "5,200"],
        ["", "", "", "SPARES-X", "", "200", "", "", "", ""],
        ["02-11-2025", "GI/101", "Random Customer", "SONY TV", "SONY", "1,000", "1,000", "", "1,000", "999"],
        ["03-11-2025", "GI/102", "Bajaj Finance Ltd", "LG FRIDGE", "LG", "3,000", "3,000", "", "3,000", "2,500"],
        ["", "Salesperson Total", "", "", "", "9,200", "", "", "", ""],
        ["Salesperson : Meena", "", "", "", "", "", "", "", "", ""],
        ["04-11-2025", "GI/200", "Walk In", "SAMSUNG AC", "SAMSUNG", "4,000", "4,000", "", "4,000", "4,000"],
        ["", "", "", "", "", "", "", "", "", ""],
        ["Total", "", "", "", "", "4,000", "", "", "", ""],
        ["Salesperson : Unknown Person", "", "", "", "", "", "", "", "", ""],
        ["05-11-2025", "GI/300", "Walk In", "SONY TV", "SONY", "700", "700", "", "700", "700"],
        ["Grand Total", "", "", "", "", "", "", "", "", ""],
    ]
