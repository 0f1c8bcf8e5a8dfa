"""Quebec net-income, family-benefit and cost-of-living simulation engine."""
from __future__ import annotations

__version__ = "0.1.0"
