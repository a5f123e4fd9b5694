"""
Models package.

Import all models here so they are registered with SQLAlchemy.
This file also makes it easy to import models from one place.
"""

from app.models.customer import Customer
from app.models.user import User
from app.models.company import Company
from app.models.list import List, ListStatus, ListSubtype, ListType
from app.models.list_company import ListCompany

# Export all models
__all__ = [
    "Customer",
    "User",
    "Company",
    "List",
    "ListCompany",
    "ListStatus",
    "ListSubtype",
    "ListType",
]
