"""objmap: convention-first object graph mapper."""

from __future__ import annotations

from objmap.domain.catalog import PropertyDescriptor, TypeCatalog, TypeDescriptor
from objmap.domain.errors import (
    CyclicGraphError,
    IncompleteMappingError,
    MalformedReferenceError,
    MaxDepthExceededError,
    ObjmapError,
)
from objmap.domain.references import PropertyReference
from objmap.domain.rules import MappingRule, RuleRegistry
from objmap.services.engine import Mapper
from objmap.services.profile import MappingProfile

__version__ = "0.3.0"

__all__ = [
    "CyclicGraphError",
    "IncompleteMappingError",
    "MalformedReferenceError",
    "Mapper",
    "MappingProfile",
    "MappingRule",
    "MaxDepthExceededError",
    "ObjmapError",
    "PropertyDescriptor",
    "PropertyReference",
    "RuleRegistry",
    "TypeCatalog",
    "TypeDescriptor",
    "__version__",
]
