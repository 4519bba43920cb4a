"""Narrow cursor interface the collector is written against.

Any parser that can answer these queries can feed the pipeline; the libclang
adapter lives in clang_frontend.py.
"""

STRUCT = "struct"
CLASS = "class"
UNION = "union"
FIELD = "field"
METHOD = "method"
FUNCTION = "function"
PARAM = "param"
NAMESPACE = "namespace"
OTHER = "other"

RECORD_KINDS = {STRUCT, CLASS, UNION}


class SourceParseError(RuntimeError):
    def __init__(self, source, reason):
        super().__init__(f"{source}: {reason}")
        self.source = source
        self.reason = reason


class SourceCursor:
    kind = OTHER
    spelling = ""
    type_spelling = ""
    result_type_spelling = ""
    source_file = None

    def children(self):
        return []

    def is_definition(self):
        return False

    def is_anonymous(self):
        return False

    def is_bitfield(self):
        return False

    def is_static(self):
        return False

    def is_public(self):
        return False

    def size(self):
        """Byte size of the cursor's type, negative when unknown."""
        return -1

    def offset_of(self, field_name):
        """Byte offset of a field of this record, negative when invalid."""
        return -1

    def tokens(self):
        return []

    def definition(self):
        """Cursor holding the body for this declaration, or None."""
        return None
