from .compile_profile import load_compile_profile
from .cursor import SourceCursor, SourceParseError
from .clang_frontend import ClangCursor, ClangSourceIndex

__all__ = [
    "load_compile_profile",
    "SourceCursor",
    "SourceParseError",
    "ClangCursor",
    "ClangSourceIndex",
]
