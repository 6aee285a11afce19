"""WSGI entry point for the citation payment JSON app.

Development: python wsgi.py
Production:  gunicorn wsgi:application
"""
import os
import sys

# Make the src layout importable without installing the package
src_path = os.path.join(os.path.abspath(os.path.dirname(__file__)), 'src')
if src_path not in sys.path:
    sys.path.insert(0, src_path)

from citepay.utils.logging_setup import setup_logging  # noqa: E402
from citepay.web import app as application  # noqa: E402

setup_logging()

if __name__ == "__main__":
    application.run(debug=True)
