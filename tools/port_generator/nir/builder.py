from pathlib import Path

from backend.translator import translate_body
from frontend.cursor import CLASS, FUNCTION, METHOD, PARAM, STRUCT, SourceParseError

from .entities import EntityGraph, FunctionInfo, MethodInfo, ParamInfo, TypeInfo, signature_identity
from .layout import extract_layout
from .type_map import is_placeholder, map_type, strip_type_prefix


def _resolve(path):
    return str(Path(path).resolve()) if path else None


def _owned(cursor, source):
    # Entities come only from the file being parsed; included headers are
    # collected when they are parsed themselves.
    if source is None or cursor.source_file is None:
        return True
    return _resolve(cursor.source_file) == source


def _map(spelling, graph, where):
    target = map_type(spelling)
    if is_placeholder(target):
        graph.diag("UNMAPPED_TYPE", f"{where}: '{spelling}' mapped to placeholder {target}", severity="note")
    return target


def _params(cursor, graph, where):
    params = []
    for ch in cursor.children():
        if ch.kind != PARAM:
            continue
        params.append(ParamInfo(ch.spelling, ch.type_spelling, _map(ch.type_spelling, graph, f"{where}({ch.spelling})")))
    return tuple(params)


def _identity(cursor):
    params = [
        ParamInfo(ch.spelling, ch.type_spelling, map_type(ch.type_spelling))
        for ch in cursor.children()
        if ch.kind == PARAM
    ]
    return signature_identity(cursor.spelling, params)


def _body_tokens(cursor):
    tokens = cursor.tokens()
    if "{" in tokens:
        return tokens
    found = cursor.definition()
    return found.tokens() if found is not None else []


def _translate(cursor, graph, where):
    result = translate_body(_body_tokens(cursor))
    if not result.translated:
        graph.diag("PLACEHOLDER_BODY", f"{where}: body emitted as placeholder ({result.reason})")
    return result


def build_method(cursor, graph, owner):
    where = f"{owner}::{cursor.spelling}"
    ret = cursor.result_type_spelling
    body = _translate(cursor, graph, where)
    return MethodInfo(
        name=cursor.spelling,
        source_return_type=ret,
        target_return_type=_map(ret, graph, f"{where} return"),
        params=_params(cursor, graph, where),
        is_static=cursor.is_static(),
        translated_body=body.text,
        untranslated_reason=body.reason,
    )


def build_function(cursor, graph):
    where = cursor.spelling
    ret = cursor.result_type_spelling
    body = _translate(cursor, graph, where)
    return FunctionInfo(
        name=cursor.spelling,
        source_return_type=ret,
        target_return_type=_map(ret, graph, f"{where} return"),
        params=_params(cursor, graph, where),
        translated_body=body.text,
        untranslated_reason=body.reason,
    )


def build_type(cursor, graph, source=None):
    name = strip_type_prefix(cursor.spelling)
    size, fields, skipped = extract_layout(cursor)
    if size < 0:
        graph.diag("TYPE_LAYOUT_UNAVAILABLE", f"{name}: type size query failed ({size})")
        return None
    for field_name in skipped:
        graph.diag("FIELD_SKIPPED", f"{name}.{field_name}: no valid byte offset", severity="note")

    methods = []
    seen = set()
    for ch in cursor.children():
        if ch.kind != METHOD:
            continue
        # First declaration of a signature wins; later ones are dropped before
        # translation so they leave no diagnostics behind.
        identity = _identity(ch)
        if identity in seen:
            continue
        seen.add(identity)
        methods.append(build_method(ch, graph, name))

    return TypeInfo(name=name, size=size, fields=tuple(fields), methods=tuple(methods), source=source)


def collect_entities(cursor, graph, source=None):
    """Walk one translation unit and append its types and functions to graph."""
    source = _resolve(source)
    _walk(cursor, graph, source)
    return graph


def _walk(cursor, graph, source):
    kind = cursor.kind
    if kind in {STRUCT, CLASS} and cursor.is_definition() and cursor.spelling and _owned(cursor, source):
        type_info = build_type(cursor, graph, source)
        if type_info is not None and not graph.add_type(type_info):
            graph.diag("DUPLICATE_TYPE", f"{type_info.name}: already collected, later definition ignored", severity="note")
    elif kind == FUNCTION and cursor.is_public() and _owned(cursor, source):
        if not graph.has_function(_identity(cursor)):
            graph.add_function(build_function(cursor, graph))

    for ch in cursor.children():
        _walk(ch, graph, source)


def collect_files(paths, index, graph=None):
    """Parse and collect every path in order; parse failures are recorded, not raised."""
    graph = graph if graph is not None else EntityGraph()
    for path in paths:
        try:
            root = index.parse(path)
        except SourceParseError as err:
            graph.fail(path, err.reason)
            continue
        collect_entities(root, graph, path)
    return graph
