"""
keygate.admin

Administrative tooling over the shared store.

Responsibilities:
- `RegistryAdmin` service for caller/provider/access-log management.
- The `keygate-admin` command-line interface.
"""

# Package marker.
