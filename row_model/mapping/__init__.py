"""Mapping layer - record metadata and the Model wrapper."""

from __future__ import annotations

from row_model.mapping.builder import RecordDeclaration, declare, introspect, is_record_type
from row_model.mapping.model import Model
from row_model.mapping.plan import FieldPlan, RecordPlan, Tags
from row_model.mapping.protocol import (
    CAPABILITIES,
    TableNameAble,
    TableNameAbleWithContext,
    TableNameCapability,
)
from row_model.mapping.registry import RecordRegistry, default_registry

__all__ = [
    "Model",
    "RecordDeclaration",
    "declare",
    "introspect",
    "is_record_type",
    "FieldPlan",
    "RecordPlan",
    "Tags",
    "TableNameAble",
    "TableNameAbleWithContext",
    "TableNameCapability",
    "CAPABILITIES",
    "RecordRegistry",
    "default_registry",
]
