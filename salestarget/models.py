# ==============================================================================
# salestarget/models.py
# ------------------------------------------------------------------------------
# Defines the database schema using SQLAlchemy ORM models.
# ==============================================================================

from datetime import datetime
import json

from salestarget import db


class Salesperson(db.Model):
    """
    A salesperson as named in the 'Salesperson: NAME' rows of the sales export.
    Names and brands are stored canonical (trimmed, uppercased).
    """
    __tablename__ = 'salesperson'
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(128), unique=True, nullable=False, index=True)
    brand = db.Column(db.String(64), nullable=True)
    section = db.Column(db.String(64), nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    targets = db.relationship('MonthlyTarget', backref='salesperson', lazy='dynamic', cascade="all, delete-orphan")
    achievements = db.relationship('MonthlyAchievement', backref='salesperson', lazy='dynamic', cascade="all, delete-orphan")

    def __repr__(self):
        return f'<Salesperson {self.id}: {self.name} ({self.brand or "no brand"})>'

    def to_dict(self):
        return {'id': self.id, 'name': self.name, 'brand': self.brand, 'section': self.section}


class MonthlyTarget(db.Model):
    """
    Stores the monthly sales target of one salesperson.
    """
    __tablename__ = 'monthly_target'
    id = db.Column(db.Integer, primary_key=True)
    salesperson_id = db.Column(db.Integer, db.ForeignKey('salesperson.id'), nullable=False)
    year = db.Column(db.Integer, nullable=False)
    month = db.Column(db.Integer, nullable=False)
    target = db.Column(db.Float, default=0)

    # Only one target per salesperson and period
    __table_args__ = (db.UniqueConstraint('salesperson_id', 'year', 'month', name='_target_period_uc'),)

    def __repr__(self):
        return f'<MonthlyTarget {self.salesperson_id} {self.year}-{self.month}: {self.target}>'


class MonthlyAchievement(db.Model):
    """
    Cumulative achievement of one salesperson for one period. Every processed
    sales block adds its own/other deltas here; uploads clear the period first.
    """
    __tablename__ = 'monthly_achievement'
    id = db.Column(db.Integer, primary_key=True)
    salesperson_id = db.Column(db.Integer, db.ForeignKey('salesperson.id'), nullable=False)
    year = db.Column(db.Integer, nullable=False, index=True)
    month = db.Column(db.Integer, nullable=False, index=True)
    own_achievement = db.Column(db.Float, default=0)
    other_achievement = db.Column(db.Float, default=0)
    total_achievement = db.Column(db.Float, default=0)

    __table_args__ = (db.UniqueConstraint('salesperson_id', 'year', 'month', name='_achievement_period_uc'),)

    def __repr__(self):
        return (f'<MonthlyAchievement {self.salesperson_id} {self.year}-{self.month}: '
                f'own={self.own_achievement} other={self.other_achievement}>')


class UploadRun(db.Model):
    """
    Audit record of one processed upload, with the per-salesperson deltas it produced.
    """
    __tablename__ = 'upload_run'
    id = db.Column(db.Integer, primary_key=True)
    sales_filename = db.Column(db.String(256), nullable=False)
    returns_filename = db.Column(db.String(256), nullable=True)
    year = db.Column(db.Integer, nullable=False)
    month = db.Column(db.Integer, nullable=False)
    upload_timestamp = db.Column(db.DateTime, index=True, default=datetime.utcnow)
    returned_invoice_count = db.Column(db.Integer, default=0)
    results_json = db.Column(db.Text, nullable=True)

    def __repr__(self):
        return f'<UploadRun {self.id}: {self.sales_filename} ({self.year}-{self.month})>'


class AppSetting(db.Model):
    """
    Stores key-value pairs for the business rules used by the reconciliation
    engine (finance customers, spares prefix, ...), so they can be changed
    without a deployment.
    """
    __tablename__ = 'app_setting'
    id = db.Column(db.Integer, primary_key=True)
    key = db.Column(db.String(128), unique=True, nullable=False, index=True)
    value = db.Column(db.String(1024), nullable=False)
    description = db.Column(db.String(512))
    value_type = db.Column(db.String(32), default='string')  # e.g., 'float', 'int', 'string', 'json'

    def __repr__(self):
        return f'<AppSetting {self.key}: {self.value}>'

    def get_value(self):
        """Casts the string value to its correct Python type."""
        if self.value_type == 'float':
            return float(self.value)
        if self.value_type == 'int':
            return int(self.value)
        if self.value_type == 'json':
            return json.loads(self.value)
        return self.value
