"""
Pi Relay
--------
Backend relay for Pi Network apps: verifies Pi user access tokens and runs
server-side balance and payment calls with the app's Server API Key.

This package contains:
- config: Application configuration
- exceptions: Error taxonomy rendered as JSON error responses
- middleware: Bearer-token guard for routes
- routes/: Flask blueprints for API endpoints
- services/: Pi API client, identity verification, payment operations
"""

__version__ = "1.0.0"
