from .core import Lookup, TraceEvent
from .db import open_source
from .errors import ExpressionError, InvalidArgument, UntranslatablePredicate
from .expr import parse
from .history import PersistHistory
from .lookup import FirstOrFallback, first_or_fallback
from .predicates import (
    And,
    Compare,
    F,
    Field,
    In,
    Not,
    Or,
    Predicate,
    Where,
    as_predicate,
)
from .sources import CountingSource, ListSource, Source, SqliteSource, as_source

__version__ = "0.1.0"
