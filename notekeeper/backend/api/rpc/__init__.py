"""
Batched procedure transport.

Mounted by the application at the `rpc.path` prefix of application.yaml.
"""

from notekeeper.backend.api.rpc.router import router

__all__ = ["router"]
