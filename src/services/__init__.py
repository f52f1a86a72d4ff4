"""Services package."""
from src.services import building_directory, staff_permission_service

__all__ = [
    "building_directory",
    "staff_permission_service",
]
