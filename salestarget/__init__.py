# ==============================================================================
# salestarget/__init__.py
# ------------------------------------------------------------------------------
# Application factory for creating and configuring the Flask app instance.
# ==============================================================================

import os
import logging

import click
from flask import Flask
from config import Config
from flask_sqlalchemy import SQLAlchemy
from flask_migrate import Migrate

# Initialize extensions globally to be accessible by other modules
db = SQLAlchemy()
migrate = Migrate()


def create_app(config_class=Config):
    """
    Application factory function. Creates and configures the Flask application.

    Args:
        config_class (class): The configuration class to use.

    Returns:
        Flask: The configured Flask application instance.
    """
    app = Flask(__name__, instance_relative_config=True)
    app.config.from_object(config_class)

    # Configure logging
    logging.basicConfig(level=logging.INFO,
                        format='%(asctime)s [%(levelname)s] %(name)s: %(message)s')
    if app.config.get('RECONCILIATION_TRACE'):
        logging.getLogger('salestarget.reconciler').setLevel(logging.DEBUG)

    # Ensure the instance folder exists for the SQLite database and the uploads
    os.makedirs(app.instance_path, exist_ok=True)

    db.init_app(app)
    migrate.init_app(app, db)

    from salestarget.main import bp as main_bp
    app.register_blueprint(main_bp)

    @app.cli.command("seed")
    def seed():
        """Seeds the database with default values."""
        from salestarget.seed import seed_data
        seed_data()
        app.logger.info("Database has been seeded with default values.")

    @app.cli.command("reconcile")
    @click.argument("sales_file", type=click.Path(exists=True, dir_okay=False))
    @click.option("--year", type=int, required=True)
    @click.option("--month", type=click.IntRange(1, 12), required=True)
    @click.option("--returns", "returns_file", type=click.Path(exists=True, dir_okay=False),
                  help="Sales return sheet whose invoices are excluded.")
    @click.option("--keep", is_flag=True, help="Add to existing achievements instead of replacing the period.")
    def reconcile(sales_file, year, month, returns_file, keep):
        """Reconciles a sales sheet into the monthly achievements."""
        from salestarget.main.utils import run_upload
        try:
            report = run_upload(sales_file, returns_file, year, month, clear=not keep)
        except ValueError as e:
            raise click.ClickException(str(e))
        for name, delta in report.deltas.items():
            click.echo(f"{name}: own={delta.own:,.2f} other={delta.other:,.2f} total={delta.total:,.2f}")
        for name in report.skipped:
            click.echo(f"{name}: skipped (unknown salesperson)")

    app.logger.info('Sales Target Tracker startup complete')

    return app
