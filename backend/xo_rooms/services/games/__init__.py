"""Game domain services: board rules, room registry and session protocol.

This package contains pure domain logic that should be imported by
socket handlers and HTTP routes, keeping transport concerns separated
from core game mechanics.
"""
