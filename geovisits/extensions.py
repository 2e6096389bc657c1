"""
Flask Extensions

A single SQLAlchemy instance backs both the Zone Store and the Visit Ledger.
"""

from flask_sqlalchemy import SQLAlchemy

# Database instance
db = SQLAlchemy()
