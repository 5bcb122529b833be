"""
LocalBiz Directory — Application Package
==========================================

Layers:

    ┌─────────────────────────────────────┐
    │  routes/       HTTP: paths, gates   │
    ├─────────────────────────────────────┤
    │  services/     rules, ownership     │
    ├─────────────────────────────────────┤
    │  models/ + schemas/  ORM + payloads │
    ├─────────────────────────────────────┤
    │  database.py   async sessions       │
    └─────────────────────────────────────┘

security/ (tokens, passwords, gates) sits beside services; client.py is the
httpx client used by callers of the API.
"""

__version__ = "1.0.0"
