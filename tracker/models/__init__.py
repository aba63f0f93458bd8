"""
Models package
"""
from .table_record import TableRecord

__all__ = ["TableRecord"]
