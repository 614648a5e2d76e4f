"""
asgi.py -- ASGI entry point for InternHub.

This is the only place production settings are loaded. The Settings object is
built once here and threaded into every store and service by create_app().

Run with:  uvicorn asgi:app --reload
           python main.py serve
"""

from api.main import create_app
from core.config import get_settings

app = create_app(get_settings())
