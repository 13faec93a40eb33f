"""Internal modules for the Matomo tracker.

These are not intended for direct use in application code.

Modules:
    dispatch - Event serialization and HTTP delivery
    user_agent - One-time user agent resolution
    http - Shared HTTP client configuration
    log - Package logging helpers
"""
