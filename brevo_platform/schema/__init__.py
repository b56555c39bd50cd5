from .types import MISSING, FieldSpec, Schema
from .validator import validate

__all__ = ["MISSING", "FieldSpec", "Schema", "validate"]
