from pathlib import Path

from fakes import FakeCursor, FakeIndex, field, function, method, namespace, param, record, toks, unit, vector3
from frontend.cursor import METHOD, SourceParseError

from nir import EntityGraph, collect_entities, collect_files


def vector2(**kw):
    return record("TSVector2D", [field("x"), field("y")], size=8, offsets={"x": 0, "y": 4}, **kw)


def collect(*children):
    return collect_entities(unit(list(children)), EntityGraph())


def codes(graph):
    return [d["code"] for d in graph.diagnostics]


def test_types_lose_library_prefix_and_keep_layout():
    length = method("Length", "float Length ( ) const { return x * x + y * y + z * z ; }")
    graph = collect(namespace("Terathon", [vector3(methods=[length])]))
    assert [t.name for t in graph.types] == ["Vector3D"]
    t = graph.types[0]
    assert t.size == 12
    assert [(f.name, f.offset) for f in t.fields] == [("x", 0), ("y", 4), ("z", 8)]
    assert t.methods[0].translated_body == "return x * x + y * y + z * z;"
    assert t.methods[0].untranslated_reason is None


def test_overloads_survive_and_repeated_signatures_collapse():
    methods = [
        method("Set", "{ x = f ; }", result="void", params=[param("f", "float")]),
        method("Set", "{ x = v . x ; }", result="void", params=[param("v", "const TSVector3D &")]),
        method("Set", "{ }", result="void", params=[param("g", "float")]),
    ]
    graph = collect(vector3(methods=methods))
    got = graph.types[0].methods
    assert [(m.name, [p.target_type for p in m.params]) for m in got] == [("Set", ["float"]), ("Set", ["Vector3D"])]
    assert got[0].translated_body == "x = f;"


def test_static_methods_are_marked():
    make = method("Zero", "{ return ( TSVector3D ( 0.0F , 0.0F , 0.0F ) ) ; }", result="TSVector3D", static=True)
    graph = collect(vector3(methods=[make]))
    m = graph.types[0].methods[0]
    assert m.is_static
    assert m.target_return_type == "Vector3D"
    assert m.translated_body == "return (new Vector3D(0.0F, 0.0F, 0.0F));"


def test_public_free_functions_are_collected_once():
    params = [param("a", "const TSVector3D &"), param("b", "const TSVector3D &")]
    body = "inline float Dot ( const TSVector3D & a , const TSVector3D & b ) { return a . x * b . x ; }"
    graph = collect(
        namespace(
            "Terathon",
            [
                function("Dot", body, params=params),
                function("Dot", body, params=params),
                function("Hidden", "{ return 0.0F ; }", public=False),
            ],
        )
    )
    assert [f.name for f in graph.functions] == ["Dot"]
    assert graph.functions[0].translated_body == "return a.x * b.x;"


def test_nested_records_are_collected_and_declarations_skipped():
    inner = record("TSBox", [field("lo")], size=4, offsets={"lo": 0})
    forward = record("TSVector4D", [], size=-1, offsets={}, defined=False)
    graph = collect(vector3(methods=[inner]), forward)
    assert [t.name for t in graph.types] == ["Vector3D", "Box"]
    assert "TYPE_LAYOUT_UNAVAILABLE" not in codes(graph)


def test_out_of_line_definition_supplies_the_body():
    out_of_line = FakeCursor(METHOD, "Length", tokens=toks("float TSVector3D :: Length ( ) const { return x ; }"))
    decl = method("Length", "float Length ( ) const ;", definition=out_of_line)
    graph = collect(vector3(methods=[decl]))
    assert graph.types[0].methods[0].translated_body == "return x;"


def test_missing_body_becomes_placeholder_with_diagnostic():
    decl = method("Length", "float Length ( ) const ;")
    deref = method("Read", "{ return * p ; }")
    graph = collect(vector3(methods=[decl, deref]))
    reasons = [m.untranslated_reason for m in graph.types[0].methods]
    assert reasons == ["no body", "pointer dereference"]
    assert codes(graph).count("PLACEHOLDER_BODY") == 2


def test_unmapped_types_degrade_with_note():
    fn = function("Raw", "{ return 0.0F ; }", params=[param("data", "const float *")])
    graph = collect(fn)
    assert graph.functions[0].params[0].target_type == "object"
    notes = [d for d in graph.diagnostics if d["code"] == "UNMAPPED_TYPE"]
    assert len(notes) == 1
    assert notes[0]["severity"] == "note"


def test_unknown_size_drops_only_that_type():
    broken = record("TSBroken", [field("a")], size=-1, offsets={})
    graph = collect(broken, vector2())
    assert [t.name for t in graph.types] == ["Vector2D"]
    assert "TYPE_LAYOUT_UNAVAILABLE" in codes(graph)


def test_fields_without_offsets_are_noted():
    rec = record("TSPair", [field("a"), field("b")], size=8, offsets={"a": 0})
    graph = collect(rec)
    assert [f.name for f in graph.types[0].fields] == ["a"]
    assert "FIELD_SKIPPED" in codes(graph)


def test_only_entities_from_the_parsed_file_are_kept(tmp_path):
    own = tmp_path / "Vector2D.h"
    other = tmp_path / "Vector3D.h"
    own.write_text("", encoding="utf-8")
    other.write_text("", encoding="utf-8")
    tree = unit(
        [
            vector3(source_file=str(other)),
            vector2(source_file=str(own)),
            function("Half", "{ return 0.5F ; }", source_file=str(other)),
        ]
    )
    graph = collect_entities(tree, EntityGraph(), source=own)
    assert [t.name for t in graph.types] == ["Vector2D"]
    assert graph.functions == []


def test_parse_failures_do_not_stop_other_files():
    index = FakeIndex(
        {
            "Vector2D.h": unit([vector2()]),
            "Broken.h": SourceParseError("Broken.h", "expected ';' after class"),
            "Vector3D.h": unit([vector3()]),
        }
    )
    paths = [Path("Vector2D.h"), Path("Broken.h"), Path("Vector3D.h")]
    graph = collect_files(paths, index)
    assert index.parsed == ["Vector2D.h", "Broken.h", "Vector3D.h"]
    assert [t.name for t in graph.types] == ["Vector2D", "Vector3D"]
    assert graph.failures == [{"source": "Broken.h", "error": "expected ';' after class"}]


def test_types_seen_in_several_files_are_kept_once():
    index = FakeIndex({"a.h": unit([vector3()]), "b.h": unit([vector3(), vector2()])})
    graph = collect_files([Path("a.h"), Path("b.h")], index)
    assert [t.name for t in graph.types] == ["Vector3D", "Vector2D"]
    assert "DUPLICATE_TYPE" in codes(graph)


def test_dropped_duplicates_leave_no_diagnostics():
    methods = [
        method("Set", "{ x = f ; }", result="void", params=[param("f", "float")]),
        method("Set", "{ x = * p ; }", result="void", params=[param("g", "float")]),
        method("Set", "{ }", result="void", params=[param("p", "float")]),
    ]
    graph = collect(vector3(methods=methods))
    assert [m.untranslated_reason for m in graph.types[0].methods] == [None]
    assert graph.diagnostics == []


def test_functions_repeated_across_files_are_translated_once():
    raw = function("Raw", "{ return * p ; }", params=[param("p", "const float *")])
    index = FakeIndex({"a.h": unit([raw]), "b.h": unit([raw])})
    graph = collect_files([Path("a.h"), Path("b.h")], index)
    assert len(graph.functions) == 1
    assert codes(graph).count("PLACEHOLDER_BODY") == 1
    assert codes(graph).count("UNMAPPED_TYPE") == 1
