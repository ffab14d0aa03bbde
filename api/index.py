# api/index.py
"""Serverless entry point (Vercel / Lambda style) around the project's WSGI app."""
import sys
from pathlib import Path

from serverless_wsgi import handle_request

# loaded from api/, so the project root is not on the path yet
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from kpi_evaluation.wsgi import application  # noqa: E402


def handler(event, context):
    return handle_request(application, event, context)
