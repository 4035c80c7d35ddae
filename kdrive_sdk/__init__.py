"""kDrive SDK for Python.

This SDK provides a small client for the Infomaniak kDrive REST API.

Public API:
    KDriveClient - User-facing client (single calls and batches)
    kdrive_sdk.models - Result and invocation models
    kdrive_sdk.exceptions - Error hierarchy

Internal (system-level, not for direct use):
    _internal.dispatch - Operation catalog, dispatcher and normalizer
"""

from kdrive_sdk._version import __version__
from kdrive_sdk.client import KDriveClient

__all__ = ["__version__", "KDriveClient"]
