# Middleware package init
"""
LocalBiz Directory — Middleware Package
=========================================

Middleware Chain (outermost first, as registered in main.create_app):
    Request → [Request ID] → [Rate Limit] → [Access Log] → [GZip] → [CORS] → Route

    - Rate Limit only guards the credential endpoints (RATE_LIMIT_PATHS).
    - Request ID runs first so rejections and access lines both carry it.
    - Responses travel the chain in reverse; X-Request-ID is added on the way out.
"""
