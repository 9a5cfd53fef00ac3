"""
keygate.auth

Authentication package.

Responsibilities:
- Caller identity model.
- Bearer credential extraction and registry-backed authentication.
"""

# Package marker.
