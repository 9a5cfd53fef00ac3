"""
keygate.db

Persistence package (SQLAlchemy async).

Responsibilities:
- Provide ORM models, engine/session setup, repositories, and the `Store`
  capability injected into the proxy components.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# The proxy path only talks to `keygate.db.store.Store`; the admin CLI uses the
# repositories directly inside its own transactions.
