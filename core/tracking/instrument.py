"""
Field instrumentation.

Two ways to make a class remember which of its declared fields were written:

- track_props: the instrumented subclass intercepts every attribute write
  on the whole instance (__setattr__). This is the reference behaviour.
- track_props_with_accessors: one property per declared field is installed
  when the decorator runs. Only writes that go through those properties are
  seen.

Known limitation of track_props_with_accessors: the accessors are generated
from the fields known when the decorator runs. A field declared later (a
subclass annotation, an attribute bolted on after the fact) gets no accessor,
so writes to it are never recorded. track_props records every write, but in
both strategies the completeness report only covers the field set captured
at decoration time; re-apply the decorator to pick up new fields.

Class-level defaults are not writes: a field with a class default still reads
its default but stays unset until something assigns it. Writes made while
constructing (the decorated class's __init__, including a dataclass
__init__) are forgotten once __init__ returns, so every new instance starts
with all fields unset. A subclass that is not itself decorated and writes
fields in its own __init__ after super().__init__() returns is outside this
reset.
"""

from __future__ import annotations

import functools
import inspect
import logging
import re
import types
import typing
from dataclasses import InitVar
from typing import Any, Callable, Dict, Iterable, List, Optional, Set, Tuple, Type

from core.tracking.report import CompletenessReport, build_report

logger = logging.getLogger(__name__)


RESERVED_NAMES = frozenset({"is_complete", "missing_fields", "completeness"})

_STATE_ATTR = "__trackprops_assigned__"
_MISSING = object()


def _assigned(obj: Any) -> Set[str]:
    # created lazily; an instance with no entry has no writes yet
    return vars(obj).setdefault(_STATE_ATTR, set())


class Tracked:
    """Mixin shared by every instrumented class."""

    __slots__ = ()

    __tracked_fields__: Tuple[str, ...] = ()
    __tracked_strategy__ = ""

    @property
    def completeness(self) -> CompletenessReport:
        return build_report(type(self).__tracked_fields__, _assigned(self))

    @property
    def is_complete(self) -> bool:
        return self.completeness.is_complete

    @property
    def missing_fields(self) -> List[str]:
        return self.completeness.missing_fields

    def __copy__(self):
        cls = type(self)
        clone = cls.__new__(cls)
        for descriptor in _slot_descriptors(cls):
            try:
                value = descriptor.__get__(self, cls)
            except AttributeError:
                continue
            descriptor.__set__(clone, value)
        clone.__dict__.update(self.__dict__)
        clone.__dict__[_STATE_ATTR] = set(_assigned(self))
        return clone


def _slot_descriptors(cls: type) -> List[Any]:
    """Member descriptors for every named slot in the MRO."""
    descriptors = []
    for klass in cls.__mro__:
        slots = vars(klass).get("__slots__", ())
        if isinstance(slots, str):
            slots = (slots,)
        for name in slots:
            if name in ("__dict__", "__weakref__"):
                continue
            if name.startswith("__") and not name.endswith("__"):
                name = f"_{klass.__name__.lstrip('_')}{name}"
            descriptors.append(vars(klass)[name])
    return descriptors


# -----------------------------
# Field set discovery
# -----------------------------

_PSEUDO_FIELD_RE = re.compile(r"\s*(typing\.|dataclasses\.)?(ClassVar|InitVar)\s*(\[|$)")


def _is_classvar(annotation: Any) -> bool:
    if isinstance(annotation, str):
        return _PSEUDO_FIELD_RE.match(annotation) is not None
    if annotation is typing.ClassVar or typing.get_origin(annotation) is typing.ClassVar:
        return True
    return isinstance(annotation, InitVar) or annotation is InitVar


def declared_fields(cls: type) -> Tuple[str, ...]:
    """Annotated instance fields, base classes first, in declaration order."""
    names: Dict[str, None] = {}
    for klass in reversed(cls.__mro__):
        if klass is object or klass is Tracked:
            continue
        for name, annotation in inspect.get_annotations(klass).items():
            if _is_classvar(annotation):
                continue
            names.setdefault(name, None)
    return tuple(names)


def _explicit_fields(fields: Iterable[str]) -> Tuple[str, ...]:
    field_set = tuple(fields)
    for name in field_set:
        if not isinstance(name, str) or not name.isidentifier():
            raise TypeError(f"Field names must be identifiers, got {name!r}")
    if len(set(field_set)) != len(field_set):
        raise ValueError(f"Duplicate field names in {list(field_set)}")
    return field_set


# -----------------------------
# Strategies
# -----------------------------

def _intercepting_namespace(cls: type, field_set: Tuple[str, ...]) -> Dict[str, Any]:
    base_setattr = cls.__setattr__

    def __setattr__(self, name: str, value: Any) -> None:
        base_setattr(self, name, value)
        _assigned(self).add(name)

    return {"__setattr__": __setattr__}


def _class_default(cls: type, name: str) -> Any:
    for klass in cls.__mro__:
        if name in vars(klass):
            value = vars(klass)[name]
            # slots and accessors from an earlier instrumentation are not defaults
            return _MISSING if inspect.isdatadescriptor(value) else value
    return _MISSING


def _field_property(cls: type, name: str) -> property:
    default = _class_default(cls, name)

    def fget(self):
        try:
            return self.__dict__[name]
        except KeyError:
            if default is not _MISSING:
                return default
        raise AttributeError(f"{type(self).__name__!r} object has no attribute {name!r}")

    def fset(self, value):
        self.__dict__[name] = value
        _assigned(self).add(name)

    def fdel(self):
        try:
            del self.__dict__[name]
        except KeyError:
            raise AttributeError(name) from None

    return property(fget, fset, fdel, doc=f"Tracked field {name!r}")


def _accessor_namespace(cls: type, field_set: Tuple[str, ...]) -> Dict[str, Any]:
    return {name: _field_property(cls, name) for name in field_set}


def _forgetful_init(cls: type) -> Callable[..., None]:
    base_init = cls.__init__

    @functools.wraps(base_init)
    def __init__(self, *args, **kwargs):
        base_init(self, *args, **kwargs)
        # construction writes are not assignments
        vars(self)[_STATE_ATTR] = set()

    return __init__


NamespaceBuilder = Callable[[type, Tuple[str, ...]], Dict[str, Any]]


def _instrument(
    cls: Any,
    fields: Optional[Iterable[str]],
    strategy: str,
    build_namespace: NamespaceBuilder,
) -> type:
    if not isinstance(cls, type):
        raise TypeError(f"Only classes can be instrumented, got {type(cls).__name__}")

    field_set = declared_fields(cls) if fields is None else _explicit_fields(fields)
    clashes = [name for name in field_set if name in RESERVED_NAMES]
    if clashes:
        raise TypeError(
            f"{cls.__qualname__} declares fields reserved for completeness reporting: {', '.join(clashes)}"
        )

    namespace: Dict[str, Any] = {
        "__module__": cls.__module__,
        "__qualname__": cls.__qualname__,
        "__doc__": cls.__doc__,
        "__wrapped__": cls,
        "__tracked_fields__": field_set,
        "__tracked_strategy__": strategy,
    }
    namespace["__init__"] = _forgetful_init(cls)
    namespace.update(build_namespace(cls, field_set))

    # a subclass of an instrumented class already has Tracked in its MRO
    bases = (cls,) if issubclass(cls, Tracked) else (Tracked, cls)
    tracked = types.new_class(cls.__name__, bases, exec_body=lambda ns: ns.update(namespace))
    logger.debug("Instrumented %s (%s): %s", cls.__qualname__, strategy, ", ".join(field_set) or "<no fields>")
    return tracked


def track_props(cls: Optional[type] = None, *, fields: Optional[Iterable[str]] = None):
    """
    Class decorator: instances record every attribute write and expose
    is_complete / missing_fields / completeness over the declared fields.

    Usable bare (@track_props) or with an explicit field list
    (@track_props(fields=["a", "b"])) when annotations are not the schema.
    """
    def wrap(target: type) -> type:
        return _instrument(target, fields, "intercept", _intercepting_namespace)

    if cls is None:
        return wrap
    return wrap(cls)


def track_props_with_accessors(cls: Optional[type] = None, *, fields: Optional[Iterable[str]] = None):
    """Like track_props, but with one generated property per declared field."""
    def wrap(target: type) -> type:
        return _instrument(target, fields, "accessors", _accessor_namespace)

    if cls is None:
        return wrap
    return wrap(cls)


# -----------------------------
# Queries
# -----------------------------

def completeness_of(obj: Any) -> Optional[CompletenessReport]:
    """Completeness report of obj, or None if obj does not track its fields."""
    if isinstance(obj, Tracked):
        return obj.completeness
    if isinstance(obj, type):
        return None
    try:
        report = getattr(obj, "completeness", None)
    except Exception:
        # an unrelated "completeness" attribute that fails is simply not a report
        logger.debug("completeness lookup failed on %s", type(obj).__name__, exc_info=True)
        return None
    return report if isinstance(report, CompletenessReport) else None


def tracked_fields(obj: Any) -> Tuple[str, ...]:
    klass: Type[Any] = obj if isinstance(obj, type) else type(obj)
    if not issubclass(klass, Tracked):
        return ()
    return klass.__tracked_fields__
