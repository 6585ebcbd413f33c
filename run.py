"""Development runner.
Usage: python run.py  (reads .env if present)
Set DATA_DIR to point at an existing data directory, ADMIN_IPS for remote admins.
"""

from __future__ import annotations

from dotenv import load_dotenv

from storeadmin import create_app

load_dotenv()

app = create_app()

if __name__ == "__main__":  # pragma: no cover
    import os
    host = os.getenv("HOST", "0.0.0.0")
    port = int(os.getenv("PORT", "3001"))
    app.run(debug=os.getenv("FLASK_DEBUG", "0") == "1", host=host, port=port)
