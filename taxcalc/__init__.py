"""Income tax estimator: progressive brackets, rebates and cess per regime/year."""
from __future__ import annotations

__version__ = "0.1.0"
