# ==============================================================================
# config.py
# ------------------------------------------------------------------------------
# Configuration settings for the Flask application.
# Uses environment variables for sensitive data to keep them out of version control.
# ==============================================================================

import os
from dotenv import load_dotenv

# Determine the absolute path of the project directory
basedir = os.path.abspath(os.path.dirname(__file__))

# Load environment variables from a .env file located in the project root
load_dotenv(os.path.join(basedir, '.env'))


def _env_flag(name, default):
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


class Config:
    """
    Base configuration class. Contains default settings that can be overridden
    by environment-specific configurations.
    """
    # --- Security ---
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-should-really-set-a-secret-key-in-your-env-file'

    # --- Database Configuration ---
    # SQLite by default; point DATABASE_URL at a server database in production.
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or \
        'sqlite:///' + os.path.join(basedir, 'instance/app.db')

    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # --- File Upload Configuration ---
    # Uploaded sales and return sheets are stored here only while they are processed.
    UPLOAD_FOLDER = os.environ.get('UPLOAD_FOLDER') or os.path.join(basedir, 'instance/uploads')

    ALLOWED_EXTENSIONS = {'.xlsx'}

    MAX_CONTENT_LENGTH = 16 * 1024 * 1024

    # --- Reconciliation ---
    # Emits per-invoice and per-line diagnostics at DEBUG level while reconciling.
    RECONCILIATION_TRACE = _env_flag('DEBUG_SALES', True)

    # The API is consumed by a separate frontend, forms are validated without CSRF tokens.
    WTF_CSRF_ENABLED = False
