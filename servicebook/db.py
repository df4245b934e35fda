"""Database setup utilities.

This module centralises the SQLAlchemy extension object used by the
models and the store adapters. Keeping database setup in a single
place makes it easier to test and to switch configurations if needed.

Import ``db`` from ``servicebook`` rather than from this module
directly. The application factory initialises ``db`` with the Flask
app.
"""
from __future__ import annotations

from flask_sqlalchemy import SQLAlchemy

db = SQLAlchemy()
