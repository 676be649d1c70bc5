from flask import Blueprint

bp = Blueprint('main', __name__, url_prefix='/api')

# Import routes at the bottom
from salestarget.main import routes  # noqa: E402,F401
