"""WSGI entry point: ``gunicorn sanitarios_dashboard.wsgi:app``."""

import os

from sanitarios_dashboard.app import create_app

app = create_app()

if __name__ == "__main__":
    app.run(host="0.0.0.0", port=int(os.getenv("PORT", "5000")))
