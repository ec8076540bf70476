"""
Event selection services.

Columnar admission predicates and the ordered, short-circuiting filter chain.
"""

from .filters import EventFilterChain, NamedPredicate, has_collection, in_range, kinematic_in_range

__all__ = [
    "EventFilterChain",
    "NamedPredicate",
    "has_collection",
    "in_range",
    "kinematic_in_range",
]
