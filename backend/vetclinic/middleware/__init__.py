# Middleware package init
"""
VetClinic Backend — Middleware Package
========================================

Middleware Chain (order matters!):
    Request → [Request ID] → [Rate Limit] → [Logging] → [GZip] → [CORS] → Route

    1. Request ID first: every response, 429s included, carries X-Request-ID
    2. Rate Limit: reject floods before any further processing
    3. Logging: access line with status and duration
    4. CORS: permissive policy, preflight handling
"""
