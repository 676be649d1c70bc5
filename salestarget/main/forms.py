# ==============================================================================
# salestarget/main/forms.py
# ------------------------------------------------------------------------------
# Validates API input using Flask-WTF. Forms read JSON bodies, multipart
# uploads or query strings; CSRF is disabled through the app config.
# ==============================================================================

from flask_wtf import FlaskForm
from flask_wtf.file import FileField
from wtforms import StringField, FloatField, IntegerField
from wtforms.validators import DataRequired, InputRequired, NumberRange, Optional


class SalespersonForm(FlaskForm):
    """Create or update a salesperson. Brand and section are optional."""
    name = StringField('Name', validators=[DataRequired(message="name is required")])
    brand = StringField('Brand', validators=[Optional()])
    section = StringField('Section', validators=[Optional()])


class TargetForm(FlaskForm):
    """Set the monthly target of one salesperson."""
    name = StringField('Name', validators=[DataRequired(message="name, year, month are required")])
    year = IntegerField('Year', validators=[InputRequired(message="name, year, month are required")])
    month = IntegerField('Month', validators=[InputRequired(message="name, year, month are required"),
                                              NumberRange(min=1, max=12)])
    target = FloatField('Target', validators=[Optional()], default=0)


class PeriodForm(FlaskForm):
    """A year/month pair, used by the bulk target and dashboard endpoints."""
    year = IntegerField('Year', validators=[InputRequired(message="year and month are required")])
    month = IntegerField('Month', validators=[InputRequired(message="year and month are required"),
                                              NumberRange(min=1, max=12)])


class UploadSalesForm(PeriodForm):
    """The sales upload. `file` is accepted as a fallback name for the sales sheet."""
    salesFile = FileField('Sales file')
    file = FileField('Sales file (fallback)')
    returnsFile = FileField('Sales return file')

    @property
    def sales_upload(self):
        for field in (self.salesFile, self.file):
            if field.data and getattr(field.data, 'filename', ''):
                return field.data
        return None

    @property
    def returns_upload(self):
        data = self.returnsFile.data
        if data and getattr(data, 'filename', ''):
            return data
        return None
