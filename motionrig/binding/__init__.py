# Binding: records and the resolver that writes them

from .records import SLOTS, Binding, BindingTable
from .resolver import BindingResolver, BindResult, display_name, strip_label

__all__ = [
    "SLOTS",
    "Binding",
    "BindingTable",
    "BindingResolver",
    "BindResult",
    "display_name",
    "strip_label",
]
