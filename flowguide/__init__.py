"""
FlowGuide - Source Package

A personal and family finance tracker that runs entirely on a local
demo store: transactions, bills, goals, investments and family members,
plus templated budget plans, monthly reports and spending forecasts.

DESIGN PRINCIPLES:
1. The store is an explicit object, never module-level state
2. Every caller gets its own copy of stored data
3. Corrupted local data repairs itself instead of crashing the app
4. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "FlowGuide Team"
