"""Record metadata introspection and declaration DSL.

Field tags are read from dataclass ``field(metadata=...)``, Pydantic
``Field(json_schema_extra=...)`` and ``Annotated[..., Tags(...)]``:

    db                 column name, or "-" to skip the field
    rw                 "r" (read only) or "w" (write only)
    select             custom SELECT expression
    no_auto_increment  "true" when the primary key is supplied by the caller
    embed              flatten a nested record's fields into this record
    has_many, has_one, belongs_to, many_to_many
                       association markers; never direct columns

Types that cannot carry tags can be declared explicitly:

    declare(User).column("name", "full_name").skip("password").register()
"""

from __future__ import annotations

import builtins
import dataclasses
import datetime
import decimal
import enum
import inspect
import sys
import types
import typing
import uuid
from typing import Annotated, Any, ClassVar, Union, get_args, get_origin

from pydantic import BaseModel

from row_model.core.exceptions import DeclarationError
from row_model.core.logging import get_logger
from row_model.core.naming import underscore
from row_model.core.settings import get_settings
from row_model.mapping.plan import FieldPlan, RecordPlan, Tags

logger = get_logger(__name__)

ASSOCIATION_TAGS = ("has_many", "has_one", "belongs_to", "many_to_many")

_NON_RECORD_MODULES = frozenset({"builtins", "datetime", "decimal", "uuid"})
_SCALARS = (
    str,
    bytes,
    int,
    float,
    bool,
    datetime.date,
    datetime.time,
    decimal.Decimal,
    uuid.UUID,
    enum.Enum,
)


def _is_pydantic_model(cls: type) -> bool:
    """Check if a class is a Pydantic BaseModel."""
    return isinstance(cls, type) and issubclass(cls, BaseModel)


def is_record_type(tp: Any) -> bool:
    """True for classes whose instances can be mapped onto a table row."""
    if not isinstance(tp, type) or issubclass(tp, _SCALARS):
        return False
    if dataclasses.is_dataclass(tp) or _is_pydantic_model(tp):
        return True
    if tp.__module__ in _NON_RECORD_MODULES:
        return False
    return bool(_type_hints(tp)) or tp.__init__ is not object.__init__


def unwrap_type(tp: Any) -> Any:
    """Strip ``Annotated`` and ``Optional`` from a declared type."""
    if get_origin(tp) is Annotated:
        tp = get_args(tp)[0]
    origin = get_origin(tp)
    if origin is Union or origin is types.UnionType:
        args = [a for a in get_args(tp) if a is not type(None)]
        if len(args) == 1:
            return unwrap_type(args[0])
    return tp


class _LenientNamespace(dict):
    """Class namespace that turns unknown names into placeholder types.

    Lookups fall through to the module globals and builtins first.
    """

    def __init__(self, namespace: Any, globalns: dict[str, Any]) -> None:
        super().__init__(namespace)
        self.globalns = globalns
        self.unresolved: list[str] = []

    def __missing__(self, key: str) -> Any:
        if key in self.globalns:
            return self.globalns[key]
        if hasattr(builtins, key):
            return getattr(builtins, key)
        placeholder = type(key, (), {"__row_model_unresolved__": True})
        self[key] = placeholder
        self.unresolved.append(key)
        return placeholder


def _is_unresolved(tp: Any) -> bool:
    return isinstance(tp, type) and "__row_model_unresolved__" in tp.__dict__


def _resolve_annotation(owner: type, name: str, annotation: Any) -> Any:
    """Evaluate one string annotation against *owner*'s module and namespace.

    Names that cannot be found (types local to a function) become
    placeholder types, so ``Optional``, ``Annotated`` tags and builtin
    types in the rest of the annotation still resolve.
    """
    if not isinstance(annotation, str):
        return annotation
    module = sys.modules.get(owner.__module__)
    globalns = dict(vars(module)) if module is not None else {}
    localns = _LenientNamespace(vars(owner), globalns)
    try:
        resolved = eval(annotation, {"__builtins__": builtins}, localns)  # noqa: S307
    except Exception as e:
        logger.warning(
            "type_hint_unresolved",
            record_type=owner.__qualname__,
            field=name,
            annotation=annotation,
            error=str(e),
        )
        return None
    if localns.unresolved:
        logger.warning(
            "type_hint_partially_resolved",
            record_type=owner.__qualname__,
            field=name,
            annotation=annotation,
            unresolved=localns.unresolved,
        )
    return resolved


def _type_hints(cls: type) -> dict[str, Any]:
    try:
        hints = typing.get_type_hints(cls, include_extras=True)
    except (NameError, TypeError):
        # Resolve field by field so one local type does not blank the class
        hints = {}
        for base in reversed(cls.__mro__):
            if base is object:
                continue
            for name, annotation in inspect.get_annotations(base).items():
                hints[name] = _resolve_annotation(base, name, annotation)
    return {
        name: hint
        for name, hint in hints.items()
        if not name.startswith("_") and get_origin(hint) is not ClassVar
    }


def _annotated_tags(tp: Any) -> dict[str, Any]:
    """Collect Tags from ``Annotated`` at any depth of a Union."""
    tags: dict[str, Any] = {}
    origin = get_origin(tp)
    if origin is Annotated:
        tags.update(_annotated_tags(get_args(tp)[0]))
        for meta in tp.__metadata__:
            if isinstance(meta, Tags):
                tags.update(meta.values)
    elif origin is Union or origin is types.UnionType:
        for arg in get_args(tp):
            tags.update(_annotated_tags(arg))
    return tags


def _default_type(default: Any, factory: Any = dataclasses.MISSING) -> type | None:
    """Type implied by a field default, used when the annotation is unresolved."""
    if isinstance(factory, type):
        return factory
    if default is not dataclasses.MISSING and default is not None:
        return type(default)
    return None


def _settle(annotation: Any, default: Any, factory: Any = dataclasses.MISSING) -> Any:
    if annotation is None or _is_unresolved(unwrap_type(annotation)):
        return _default_type(default, factory) or annotation
    return annotation


def _raw_fields(cls: type) -> list[tuple[str, Any, dict[str, Any]]]:
    """Return ``(attribute, annotation, tags)`` for every declared field."""
    # Pydantic model
    if _is_pydantic_model(cls):
        result = []
        for name, info in cls.model_fields.items():  # type: ignore[attr-defined]
            tags: dict[str, Any] = {}
            if isinstance(info.json_schema_extra, dict):
                tags.update(info.json_schema_extra)
            for meta in info.metadata:
                if isinstance(meta, Tags):
                    tags.update(meta.values)
            tags.update(_annotated_tags(info.annotation))
            result.append((name, info.annotation, tags))
        return result

    hints = _type_hints(cls)

    # Dataclass
    if dataclasses.is_dataclass(cls):
        result = []
        for f in dataclasses.fields(cls):
            annotation = hints.get(f.name, f.type)
            tags = dict(f.metadata)
            tags.update(_annotated_tags(annotation))
            result.append((f.name, _settle(annotation, f.default, f.default_factory), tags))
        return result

    # Plain class - annotations, else __init__ parameters
    if hints:
        return [
            (
                name,
                _settle(hint, getattr(cls, name, dataclasses.MISSING)),
                _annotated_tags(hint),
            )
            for name, hint in hints.items()
        ]
    try:
        sig = inspect.signature(cls.__init__)  # type: ignore[misc]
    except (ValueError, TypeError):
        return []
    return [
        (name, param.annotation if param.annotation is not param.empty else None, {})
        for name, param in sig.parameters.items()
        if name != "self" and param.kind not in (param.VAR_POSITIONAL, param.VAR_KEYWORD)
    ]


def _flag(value: Any) -> bool:
    return value is True or (isinstance(value, str) and value.lower() == "true")


def _tag_str(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _field_plans(
    cls: type,
    path: tuple[str, ...],
    seen: frozenset[type],
) -> list[FieldPlan]:
    plans: list[FieldPlan] = []
    for attribute, annotation, tags in _raw_fields(cls):
        association = next((t for t in ASSOCIATION_TAGS if tags.get(t)), None)
        target = unwrap_type(annotation)

        if _flag(tags.get("embed")) and association is None:
            if is_record_type(target) and target not in seen:
                plans.extend(_field_plans(target, path + (attribute,), seen | {cls}))
                continue

        db = _tag_str(tags.get("db"))
        plans.append(
            FieldPlan(
                attribute=attribute,
                path=path + (attribute,),
                column=db if db and db != "-" else underscore(attribute),
                annotation=target,
                skip=db == "-",
                rw=_tag_str(tags.get("rw")),
                select=tags.get("select") or None,
                no_auto_increment=_tag_str(tags.get("no_auto_increment")),
                association=association,
            )
        )
    return plans


def introspect(record_type: type) -> RecordPlan:
    """Build a RecordPlan from the type's declared fields and tags."""
    return RecordPlan(
        record_type=record_type,
        fields=tuple(_field_plans(record_type, (), frozenset({record_type}))),
        id_attribute=get_settings().id_attribute,
    )


def declare(record_type: type) -> RecordDeclaration:
    """Entry point for the explicit declaration DSL.

    Args:
        record_type: The record class being declared.

    Returns:
        A builder for chaining field overrides.
    """
    return RecordDeclaration(record_type)


class RecordDeclaration:
    """Fluent builder overriding the introspected metadata of a record type."""

    def __init__(self, record_type: type) -> None:
        self._record_type = record_type
        self._overrides: dict[str, dict[str, Any]] = {}
        self._id_attribute: str | None = None

    def _override(self, attribute: str, **changes: Any) -> RecordDeclaration:
        self._overrides.setdefault(attribute, {}).update(changes)
        return self

    def column(self, attribute: str, name: str) -> RecordDeclaration:
        """Map *attribute* to column *name*."""
        return self._override(attribute, column=name, skip=False)

    def skip(self, *attributes: str) -> RecordDeclaration:
        """Exclude attributes from the column set."""
        for attribute in attributes:
            self._override(attribute, skip=True)
        return self

    def read_only(self, attribute: str) -> RecordDeclaration:
        return self._override(attribute, rw="r")

    def write_only(self, attribute: str) -> RecordDeclaration:
        return self._override(attribute, rw="w")

    def select(self, attribute: str, sql: str) -> RecordDeclaration:
        """Read *attribute* through a custom SELECT expression."""
        return self._override(attribute, select=sql)

    def primary_key(self, attribute: str, auto_increment: bool = True) -> RecordDeclaration:
        """Use *attribute* as the primary key."""
        self._id_attribute = attribute
        return self._override(
            attribute, no_auto_increment="false" if auto_increment else "true"
        )

    def build(self) -> RecordPlan:
        """Compile the declaration into a RecordPlan."""
        base = introspect(self._record_type)
        known = {f.attribute for f in base.fields}
        unknown = sorted(set(self._overrides) - known)
        if unknown:
            raise DeclarationError(
                f"{self._record_type.__name__} has no fields named {unknown}"
            )

        fields = tuple(
            dataclasses.replace(f, **self._overrides[f.attribute])
            if f.attribute in self._overrides
            else f
            for f in base.fields
        )
        return RecordPlan(
            record_type=self._record_type,
            fields=fields,
            id_attribute=self._id_attribute or base.id_attribute,
        )

    def register(self, registry: Any = None) -> RecordPlan:
        """Build the plan and install it in *registry* (the default one if None)."""
        from row_model.mapping.registry import default_registry

        plan = self.build()
        if registry is None:
            registry = default_registry
        registry.register(plan)
        return plan
