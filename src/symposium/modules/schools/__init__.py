"""
Schools module - Participating schools and the bundled reference list.
"""

from symposium.modules.schools.models import School
from symposium.modules.schools.repository import SchoolRepository

__all__ = ["School", "SchoolRepository"]
