"""WSGI entry point: ``gunicorn washdesk_admin.wsgi:app``."""

import os

from washdesk_admin.app import create_app

app = create_app()

if __name__ == "__main__":
    app.run(host="0.0.0.0", port=int(os.getenv("PORT", "5000")))
