"""Strongly typed identifiers for directory entities.

Directory identifiers are plain strings (uids, calendar ids, DNs). NewType
keeps user ids and resource ids from being mixed up.
"""

from typing import NewType

UserId = NewType("UserId", str)
ResourceId = NewType("ResourceId", str)
