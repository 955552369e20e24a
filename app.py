"""Development server entry point.

Run with ``python app.py`` after ``pip install -e .``; the port comes from
the ``PORT`` environment variable (default 5000).
"""

import os

from attendance_hub.main import create_app

app = create_app()


if __name__ == "__main__":
    app.run(host="0.0.0.0", port=int(os.getenv("PORT", "5000")), debug=app.config["DEBUG"])
