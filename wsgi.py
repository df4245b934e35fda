# wsgi.py (at repo root): gunicorn wsgi:app
from servicebook import create_app

app = create_app()
