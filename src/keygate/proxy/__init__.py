"""
keygate.proxy

Forwarding proxy package.

Responsibilities:
- Provider resolution, access logging, header rewriting, and the request pipeline.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Everything here depends on `keygate.db.store.Store`, never on a global DB handle.
