from .table import ReferenceTable, get_reference_table

__all__ = ["ReferenceTable", "get_reference_table"]
