"""
Admin backend for scheduling daily multiple-choice tests.

The FastAPI application lives in ``examadmin.main``.
"""

__version__ = "1.0.0"
