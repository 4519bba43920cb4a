from .emitter import emit_functions, emit_interfaces, emit_struct
from .swizzle import swizzle_accessors
from .translator import translate_body

__all__ = [
    "emit_functions",
    "emit_interfaces",
    "emit_struct",
    "swizzle_accessors",
    "translate_body",
]
