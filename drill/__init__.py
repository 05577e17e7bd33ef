"""
Drill: adaptive practice scheduling for recall drills.

Decides which item to present next and maintains a per-item memory and
speed model after each response.

Components:
- adaptive: forgetting/speed models, weighted selection, evaluators
- storage: statistics backends (memory, SQLite)
- factory: settings-driven wiring
"""

__version__ = "1.0.0"
