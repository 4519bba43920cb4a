from frontend.cursor import FIELD, RECORD_KINDS

from .entities import FieldInfo
from .type_map import map_type


def _layout_fields(record):
    # Members of anonymous unions/structs share the enclosing record's storage.
    for ch in record.children():
        if ch.kind == FIELD:
            yield ch
        elif ch.kind in RECORD_KINDS and ch.is_anonymous():
            yield from _layout_fields(ch)


def extract_layout(record):
    """Return (size, fields, skipped_names) for a record cursor.

    Offsets are queried on the outer record so overlapping union members keep
    their real positions. A field whose offset is invalid or falls outside
    the record is skipped; the rest of the record is still laid out.
    """
    size = record.size()
    fields = []
    skipped = []
    for fc in _layout_fields(record):
        name = fc.spelling
        if not name or fc.is_bitfield():
            skipped.append(name or "<unnamed>")
            continue
        offset = record.offset_of(name)
        if offset < 0 or offset >= size:
            skipped.append(name)
            continue
        source_type = fc.type_spelling
        fields.append(FieldInfo(name, source_type, map_type(source_type), offset))
    return size, fields, skipped


def check_layout(type_info):
    """List offset violations; empty when every field lies inside the type."""
    problems = []
    for f in type_info.fields:
        if not 0 <= f.offset < type_info.size:
            problems.append(f"{type_info.name}.{f.name} offset {f.offset} outside size {type_info.size}")
    return problems
