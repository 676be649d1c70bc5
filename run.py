# ==============================================================================
# run.py
# ------------------------------------------------------------------------------
# The main entry point to launch the Flask application.
# ==============================================================================

from salestarget import create_app, db
from salestarget.models import AppSetting, MonthlyAchievement, MonthlyTarget, Salesperson, UploadRun

# Create the Flask application instance using the factory function
app = create_app()


@app.shell_context_processor
def make_shell_context():
    """Provides a shell context for the `flask shell` command."""
    return {
        'db': db,
        'AppSetting': AppSetting,
        'MonthlyAchievement': MonthlyAchievement,
        'MonthlyTarget': MonthlyTarget,
        'Salesperson': Salesperson,
        'UploadRun': UploadRun,
    }


if __name__ == '__main__':
    app.run(debug=True)
