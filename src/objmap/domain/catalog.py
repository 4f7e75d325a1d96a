"""Type catalog: the declared-type metadata the engine relies on.

Each destination type is described by a :class:`TypeDescriptor`: a name, a
factory producing a zero-value instance, and one :class:`PropertyDescriptor`
per public property with its declared type string (see
:mod:`objmap.domain.types`).

Types are registered explicitly::

    catalog = TypeCatalog()
    catalog.register(Address, {"street": "string", "city": "string"})
    catalog.register(Customer, {"name": "string", "address": "Address"})

When the property table is omitted it is derived from the class
annotations (``str`` -> ``string``, ``list[Address]`` -> ``Address[]``, ...).
Classes that were never registered are described on demand the same way,
but only registered names count as known composite types.
"""

from __future__ import annotations

import collections.abc as cabc
import dataclasses
import inspect
import logging
import types
import typing
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any, ClassVar

from objmap.domain.errors import RegistryFrozenError, UnknownTypeError
from objmap.domain.records import make_record_class
from objmap.domain.references import PropertyReference
from objmap.domain.types import ARRAY_SUFFIX, ScalarType

logger = logging.getLogger(__name__)

Getter = Callable[[Any], Any]
Setter = Callable[[Any, Any], None]

_PY_SCALARS: dict[type, str] = {
    bool: ScalarType.BOOL.value,
    int: ScalarType.INT.value,
    float: ScalarType.FLOAT.value,
    str: ScalarType.STRING.value,
    bytes: ScalarType.BYTES.value,
}
_PY_SCALAR_NAMES: dict[str, str] = {py.__name__: declared for py, declared in _PY_SCALARS.items()}
_PY_ARRAYS: tuple[type, ...] = (list, tuple, dict, set, frozenset)
_PY_ARRAY_NAMES = frozenset(t.__name__ for t in _PY_ARRAYS)
_SEQUENCE_ORIGINS: tuple[Any, ...] = (list, tuple, set, frozenset)


@dataclass(frozen=True)
class PropertyDescriptor:
    """A destination property: owner, name, declared type, and accessors.

    Passing a descriptor as the destination of ``Mapper.map`` maps a single
    raw value into it.
    """

    owner: str
    name: str
    declared_type: str | None = None
    getter: Getter | None = field(default=None, compare=False, repr=False)
    setter: Setter | None = field(default=None, compare=False, repr=False)

    @property
    def reference(self) -> PropertyReference:
        return PropertyReference(self.owner, self.name)

    def get(self, obj: Any) -> Any:
        if self.getter is not None:
            return self.getter(obj)
        return getattr(obj, self.name)

    def set(self, obj: Any, value: Any) -> None:
        if self.setter is not None:
            self.setter(obj, value)
        else:
            setattr(obj, self.name, value)

    def is_readable_on(self, obj: Any) -> bool:
        if self.getter is not None:
            return True
        return hasattr(obj, self.name)


@dataclass(frozen=True)
class TypeDescriptor:
    """A known composite type."""

    name: str
    cls: type
    factory: Callable[[], Any] = field(compare=False, repr=False)
    properties: tuple[PropertyDescriptor, ...] = ()

    def instantiate(self) -> Any:
        """Return a fresh zero-value instance."""
        return self.factory()

    def get_property(self, name: str) -> PropertyDescriptor | None:
        for prop in self.properties:
            if prop.name == name:
                return prop
        return None

    @property
    def property_names(self) -> list[str]:
        return [prop.name for prop in self.properties]


PropertyTable = Mapping[str, Any]


class TypeCatalog:
    """Registry of known composite types and their property tables."""

    def __init__(self) -> None:
        self._by_name: dict[str, TypeDescriptor] = {}
        self._by_class: dict[type, TypeDescriptor] = {}
        self._frozen = False

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def register(
        self,
        cls: type,
        properties: PropertyTable | None = None,
        *,
        name: str | None = None,
        factory: Callable[[], Any] | None = None,
        accessors: Mapping[str, tuple[Getter | None, Setter | None]] | None = None,
    ) -> TypeDescriptor:
        """Declare *cls* as a known type.

        Args:
            cls: The class to register.
            properties: ``{property: declared_type}``. Values may be type
                name strings or Python annotations. Derived from the class
                annotations when omitted.
            name: Catalog name; defaults to ``cls.__name__``. Rule
                references use this as their owner.
            factory: Zero-argument callable returning a fresh instance.
            accessors: Optional ``{property: (getter, setter)}`` overrides.

        Raises:
            RegistryFrozenError: If the catalog has been frozen.
        """
        if self._frozen:
            msg = f"Cannot register {cls.__name__}: catalog is frozen"
            raise RegistryFrozenError(msg)
        type_name = name or cls.__name__
        table = dict(properties) if properties is not None else _annotation_table(cls)
        accessors = accessors or {}
        props: list[PropertyDescriptor] = []
        for prop_name, declared in table.items():
            getter, setter = accessors.get(prop_name, (None, None))
            props.append(
                PropertyDescriptor(
                    owner=type_name,
                    name=prop_name,
                    declared_type=self._declared_name(declared),
                    getter=getter,
                    setter=setter,
                )
            )
        descriptor = TypeDescriptor(
            name=type_name,
            cls=cls,
            factory=factory or _zero_factory(cls),
            properties=tuple(props),
        )
        if type_name in self._by_name:
            logger.debug("Replacing type registration for %s", type_name)
        self._by_name[type_name] = descriptor
        self._by_name.setdefault(_qualified_name(cls), descriptor)
        self._by_class[cls] = descriptor
        return descriptor

    def declare(
        self,
        properties: PropertyTable | None = None,
        *,
        name: str | None = None,
        factory: Callable[[], Any] | None = None,
    ) -> Callable[[type], type]:
        """Class decorator form of :meth:`register`."""

        def decorator(cls: type) -> type:
            self.register(cls, properties, name=name, factory=factory)
            return cls

        return decorator

    def define(self, name: str, properties: PropertyTable) -> TypeDescriptor:
        """Create a :class:`~objmap.domain.records.Record` type and register it."""
        record_cls = make_record_class(name, properties.keys())
        return self.register(record_cls, properties, name=name)

    def freeze(self) -> None:
        """Make the catalog read-only. Idempotent."""
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def is_known(self, type_name: str) -> bool:
        return type_name.strip() in self._by_name

    def find(self, type_name: str) -> TypeDescriptor | None:
        return self._by_name.get(type_name.strip())

    def get(self, type_name: str) -> TypeDescriptor:
        """Return the descriptor for *type_name*.

        Raises:
            UnknownTypeError: If *type_name* was never registered.
        """
        descriptor = self.find(type_name)
        if descriptor is None:
            raise UnknownTypeError(type_name)
        return descriptor

    def instantiate(self, type_name: str) -> Any:
        return self.get(type_name).instantiate()

    def describe(self, target: Any) -> TypeDescriptor:
        """Describe a registered or unregistered class (or an instance of one).

        Unregistered classes are described from their annotations; classes
        without annotations fall back to the public attributes of *target*
        when *target* is an instance. Nothing is cached.
        """
        cls = target if isinstance(target, type) else type(target)
        registered = self._by_class.get(cls)
        if registered is not None:
            return registered
        table = _annotation_table(cls)
        if not table and not isinstance(target, type):
            table = dict.fromkeys(_public_attributes(target))
        type_name = cls.__name__
        props = tuple(
            PropertyDescriptor(
                owner=type_name, name=prop_name, declared_type=self._declared_name(declared)
            )
            for prop_name, declared in table.items()
        )
        return TypeDescriptor(name=type_name, cls=cls, factory=_zero_factory(cls), properties=props)

    def declared_type(self, prop: PropertyDescriptor) -> str | None:
        """The declared type string of *prop*, or None if it has none."""
        return prop.declared_type or None

    def readable_properties(self, obj: Any) -> dict[str, PropertyDescriptor]:
        """Public properties that can be read off *obj*, keyed by name."""
        descriptor = self.describe(obj)
        readable = {prop.name: prop for prop in descriptor.properties if prop.is_readable_on(obj)}
        for attr in (*_public_attributes(obj), *_public_properties(type(obj))):
            readable.setdefault(attr, PropertyDescriptor(owner=descriptor.name, name=attr))
        return readable

    def type_name_of(self, obj: Any) -> str:
        """Catalog name of *obj*'s class, or the bare class name."""
        cls = obj if isinstance(obj, type) else type(obj)
        registered = self._by_class.get(cls)
        return registered.name if registered is not None else cls.__name__

    def type_names_of(self, obj: Any) -> frozenset[str]:
        """Every name a rule may use to refer to *obj*'s type."""
        cls = type(obj)
        names = {cls.__name__, cls.__qualname__, _qualified_name(cls)}
        registered = self._by_class.get(cls)
        if registered is not None:
            names.add(registered.name)
        return frozenset(names)

    def __contains__(self, type_name: object) -> bool:
        return isinstance(type_name, str) and self.is_known(type_name)

    def __iter__(self) -> typing.Iterator[TypeDescriptor]:
        return iter(list(self._by_class.values()))

    def __len__(self) -> int:
        return len(self._by_class)

    # ------------------------------------------------------------------
    # Annotation -> declared type name
    # ------------------------------------------------------------------

    def _declared_name(self, declared: Any) -> str | None:
        if declared is None:
            return None
        if isinstance(declared, str):
            return self._declared_from_string(declared)
        return self._declared_from_annotation(declared)

    def _declared_from_string(self, text: str) -> str | None:
        text = text.strip()
        if not text:
            return None
        if text.startswith("Optional[") and text.endswith("]"):
            return self._declared_from_string(text[len("Optional[") : -1])
        if "|" in text:
            parts = [p.strip() for p in text.split("|") if p.strip() != "None"]
            return self._declared_from_string(parts[0]) if len(parts) == 1 else None
        for prefix in ("list[", "tuple[", "set[", "frozenset[", "Sequence[", "Iterable["):
            if text.startswith(prefix) and text.endswith("]"):
                inner = text[len(prefix) : -1].split(",")[0]
                element = self._declared_from_string(inner)
                return f"{element}{ARRAY_SUFFIX}" if element else "array"
        if text.startswith("dict[") or text in _PY_ARRAY_NAMES:
            return "array"
        return _PY_SCALAR_NAMES.get(text, text)

    def _declared_from_annotation(self, annotation: Any) -> str | None:
        if annotation in _PY_SCALARS:
            return _PY_SCALARS[annotation]
        if annotation in _PY_ARRAYS:
            return "array"
        origin = typing.get_origin(annotation)
        args = typing.get_args(annotation)
        if origin in (typing.Union, types.UnionType):
            remaining = [arg for arg in args if arg is not type(None)]
            if len(remaining) == 1:
                return self._declared_from_annotation(remaining[0])
            return None
        if origin is not None:
            if origin in _SEQUENCE_ORIGINS or _is_abc_sequence(origin):
                element = self._declared_from_annotation(args[0]) if args else None
                return f"{element}{ARRAY_SUFFIX}" if element else "array"
            if origin is dict or origin is Mapping:
                return "array"
            return None
        if isinstance(annotation, typing.ForwardRef):
            return self._declared_from_string(annotation.__forward_arg__)
        if isinstance(annotation, type):
            registered = self._by_class.get(annotation)
            return registered.name if registered is not None else annotation.__name__
        return None


def _is_abc_sequence(origin: Any) -> bool:
    return origin in (cabc.Sequence, cabc.MutableSequence, cabc.Iterable, cabc.Collection)


def _qualified_name(cls: type) -> str:
    return f"{cls.__module__}.{cls.__qualname__}"


def _annotation_table(cls: type) -> dict[str, Any]:
    """Public, non-ClassVar annotations of *cls* and its bases."""
    try:
        hints = typing.get_type_hints(cls)
    except (NameError, TypeError):
        hints = {}
        for base in reversed(cls.__mro__):
            try:
                hints.update(inspect.get_annotations(base))
            except NameError:
                continue
    table: dict[str, Any] = {}
    for name, hint in hints.items():
        if name.startswith("_"):
            continue
        if typing.get_origin(hint) is ClassVar:
            continue
        if isinstance(hint, str) and hint.startswith(("ClassVar", "typing.ClassVar")):
            continue
        table[name] = hint
    return table


def _public_attributes(obj: Any) -> list[str]:
    try:
        attrs = vars(obj)
    except TypeError:
        return []
    return [name for name in attrs if not name.startswith("_")]


def _public_properties(cls: type) -> list[str]:
    return [
        name
        for name in dir(cls)
        if not name.startswith("_") and isinstance(getattr(cls, name, None), property)
    ]


def _zero_factory(cls: type) -> Callable[[], Any]:
    """Factory producing an instance without caller-supplied arguments.

    Dataclasses with required fields get None for each of them; pydantic
    models are built with ``model_construct()`` so validation is skipped.
    """

    def build() -> Any:
        if dataclasses.is_dataclass(cls):
            required = {
                f.name: None
                for f in dataclasses.fields(cls)
                if f.init
                and f.default is dataclasses.MISSING
                and f.default_factory is dataclasses.MISSING
            }
            return cls(**required)
        model_construct = getattr(cls, "model_construct", None)
        if model_construct is not None:
            return model_construct()
        return cls()

    return build
