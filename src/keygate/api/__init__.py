"""
keygate.api

HTTP surface of the proxy server.

Responsibilities:
- FastAPI app factory, health probes, and the catch-all proxy route.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# The API layer stays thin: routing + wiring, with request handling in `keygate.proxy`.
