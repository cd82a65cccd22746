"""External data source integrations.

Each subdirectory is one data source with a consistent structure:

    datasources/{name}/
    ├── __init__.py       # Public API re-exports
    ├── client.py         # API URLs and constants
    ├── models.py         # Dataclasses for parsed records (optional)
    └── {feature}.py      # Parse + fetch functions

Sources:
  - phenocam: spring transition dates (validation table)
  - daymet: daily tmax/tmin/tmean at a site (drivers table)
  - modis: MCD12Q2 green-up (independent reference)

Parsing is separate from fetching: ``parse_*`` functions take the response
body and are what the tests exercise; ``fetch_*`` functions add the HTTP call
through ``services.http.session``.
"""
