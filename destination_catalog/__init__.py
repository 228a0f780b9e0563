"""
destination-catalog: uniform drivers for third-party destinations.

Architecture:
    static config → get_destination() → DriverProxy → Driver → vendor SDK/API

Layers:
    - config.py: Pydantic settings per destination, destinations.yml loading
    - credentials.py: env/keychain lookup for secrets
    - destinations/: drivers and the lifecycle proxy
    - cli/: the `dc` command line

Key Concepts:
    - Every proxied action connects, runs, and disconnects on its own driver
    - BigQuery DML is rendered from the live table schema
    - Xero calls fan out across every authorized tenant
"""

__version__ = "0.1.0"
