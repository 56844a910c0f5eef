"""
ORC Polar Optimal - optimal sailing angles and target speeds from ORC data.

This package contains the complete application:
- core: Framework-agnostic polar logic
- infrastructure: ORC API client
- api: FastAPI routes and dependencies
- config: Application configuration
"""

__version__ = "0.1.0"
