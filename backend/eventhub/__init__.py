"""
EventHub - college event discovery core.

Event records live in one JSON container behind a key/value storage handle:
- Capacity-checked registration with optimistic versioning
- Search and dashboard views over loaded snapshots
- Organizer and admin lifecycle operations
"""

__version__ = "1.0.0"
