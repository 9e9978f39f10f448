"""
Backend package for the Memory Box API.

The request handling core lives in ``backend.service`` and is served either
by the FastAPI application in ``backend.app`` (long-running server) or by
the ``api`` HTTPS cloud function in ``main.py``.
"""
