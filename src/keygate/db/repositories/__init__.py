"""
keygate.db.repositories

Repository package.

Responsibilities:
- Group data-access repositories for callers, providers, and the access log.
"""

# Package marker; repositories are imported directly from submodules.


# --- Module Notes -----------------------------------------------------------
# Repositories are intentionally thin; transactions belong to `Store` and the admin registry.
