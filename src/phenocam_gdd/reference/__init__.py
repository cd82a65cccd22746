"""Static reference data that doesn't change with API calls.

Adding a new module:
1. Create ``reference/{name}.py`` with constants/dataclasses
2. Re-export from this ``__init__.py``
"""

from phenocam_gdd.reference.sites import DEFAULT_SITES as DEFAULT_SITES
from phenocam_gdd.reference.sites import SITES_BY_NAME as SITES_BY_NAME
