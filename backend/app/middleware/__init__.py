"""
Tasklane Backend — Middleware Package
=======================================

Middleware Chain (order matters!):
    Request → [Rate Limit] → [Request ID] → [Logging] → [GZip] → [CORS] → Route

    1. Rate Limit first: reject abusive clients before any database work
    2. Request ID: correlation ID for logs and error responses
    3. Logging: method, route template, status and duration, tagged with the request ID
"""
