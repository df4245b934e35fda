"""
Entry point for running the ServiceBook Flask application.

This module imports the application factory and starts the development
server when executed directly. In production, a WSGI server like
gunicorn should import ``app`` from ``wsgi`` and serve it instead.
"""

from servicebook import create_app, db

app = create_app()

if __name__ == "__main__":
    # Only create the database tables automatically in local
    # development when running this module directly. Production
    # deployments should manage migrations with ``flask db upgrade``.
    with app.app_context():
        db.create_all()
    app.run(host="0.0.0.0", port=5000, debug=True)
