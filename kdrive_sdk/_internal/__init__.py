"""Internal modules for kDrive SDK.

WARNING: This package contains system-level modules used by KDriveClient.
These are not intended for direct use in application code.

Modules:
    dispatch - Operation catalog, request dispatcher and response normalizer
    http - Shared HTTP client configuration
"""
