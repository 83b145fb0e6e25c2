"""
PythonAnywhere WSGI entry point for Analyst Path.

In the PythonAnywhere Web tab:
  - Source code:    /home/<your-username>/analyst-path
  - Working dir:    /home/<your-username>/analyst-path
  - WSGI file:      /home/<your-username>/analyst-path/wsgi.py
  - Virtualenv:     /home/<your-username>/analyst-path/.venv  (pip install -e . inside it)

Put SECRET_KEY, DATABASE_URL (e.g. a PythonAnywhere MySQL or Postgres URL)
and TZ_OFFSET_HOURS in a .env file next to this one; app.py loads it.
Run `python seed.py` from a console once after deploying so the first
request does not pay for seeding the curriculum. Reload the web app after
bumping CONTENT_SEED_VERSION.
"""
import os
import sys

# Flat layout: app.py and the modules it imports live next to this file
project_dir = os.path.dirname(os.path.abspath(__file__))
if project_dir not in sys.path:
    sys.path.insert(0, project_dir)

from app import app as application  # noqa: E402,F401  (PythonAnywhere looks for 'application')
