"""Top-level package for the Compound Dashboard.

This file makes the directory a Python package and exposes
convenient names.  The primary modules are:

* ``projection`` – day-by-day compound interest schedule and totals
* ``goal_solver`` – the daily rate required to reach a target balance
* ``recurring`` – materializing monthly expense templates into the ledger
* ``dashboard`` – the Streamlit app that ties everything together

To run the dashboard from the command line you can execute:

```bash
streamlit run compound_dashboard/Home.py
```
"""

from . import goal_solver  # noqa: F401  # re-exported for convenience
from . import projection  # noqa: F401  # re-exported for convenience
from . import recurring  # noqa: F401  # re-exported for convenience
# Streamlit may not be installed in all environments (e.g. a headless
# batch job running scripts/apply_recurring.py).
try:
    from . import dashboard  # type: ignore  # noqa: F401
except ModuleNotFoundError:
    dashboard = None  # type: ignore


__all__ = ["projection", "goal_solver", "recurring", "dashboard"]
