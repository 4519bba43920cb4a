import sys
from pathlib import Path

from backend import emit_functions, emit_interfaces, emit_struct
from frontend import ClangSourceIndex, load_compile_profile
from nir import collect_files
from nir.layout import check_layout

from .workspace import OutputWorkspace


SOURCE_PATTERNS = ("*.h", "*.hpp")
INTERFACES_FILE = "Interfaces.cs"
FUNCTIONS_FILE = "TerathonUtils.cs"


def sanitize_name(text):
    out = []
    for ch in text:
        if ch.isalnum() or ch in ("_", "-", "."):
            out.append(ch)
        else:
            out.append("_")
    return "".join(out)


def discover_sources(input_dir):
    root = Path(input_dir)
    if not root.is_dir():
        raise ValueError(f"input directory not found: {root}")
    found = set()
    for pattern in SOURCE_PATTERNS:
        found.update(p for p in root.rglob(pattern) if p.is_file())
    return sorted(found)


def render_outputs(graph, emit_structs=True, with_interfaces=True):
    outputs = {
        INTERFACES_FILE: emit_interfaces(with_interfaces),
        FUNCTIONS_FILE: emit_functions(graph.functions),
    }
    if emit_structs:
        for t in graph.types:
            name = f"{sanitize_name(t.name)}.cs"
            if name in outputs:
                graph.diag("OUTPUT_NAME_CLASH", f"{t.name}: {name} already generated, type skipped")
                continue
            outputs[name] = emit_struct(t, implement_interface=with_interfaces)
    return outputs


def _placeholder_count(graph):
    count = sum(1 for fn in graph.functions if fn.untranslated_reason)
    for t in graph.types:
        count += sum(1 for m in t.methods if m.untranslated_reason)
    return count


def run_pipeline(
    input_dir,
    output_dir,
    compile_profile=None,
    emit_structs=True,
    emit_interfaces=True,
    index=None,
):
    """Collect every header under input_dir and write the C# port to output_dir.

    The output directory is checked before any parsing so an unusable
    destination aborts the run without partial output. Headers that fail to
    parse are skipped and reported in the returned summary.
    """
    workspace = OutputWorkspace(output_dir)
    workspace.prepare()

    sources = discover_sources(input_dir)
    if index is None:
        profile = compile_profile or load_compile_profile(include_dir=input_dir)
        index = ClangSourceIndex(profile.get("args", []))

    graph = collect_files(sources, index)
    for failure in graph.failures:
        print(f"port: warning: skipped {failure['source']}: {failure['error']}", file=sys.stderr)
    for t in graph.types:
        for problem in check_layout(t):
            graph.diag("LAYOUT_OUT_OF_RANGE", problem, severity="error")

    outputs = render_outputs(graph, emit_structs, emit_interfaces)
    removed = workspace.clear()
    written = [str(workspace.write(name, text)).replace("\\", "/") for name, text in outputs.items()]

    print(f"port: generated {len(graph.types)} types and {len(graph.functions)} functions into {output_dir}")
    if graph.failures:
        print(f"port: {len(graph.failures)} of {len(sources)} input files failed to parse", file=sys.stderr)

    return {
        "input_dir": str(input_dir).replace("\\", "/"),
        "output_dir": str(output_dir).replace("\\", "/"),
        "sources": [str(p).replace("\\", "/") for p in sources],
        "totals": {
            "files": len(sources),
            "failed": len(graph.failures),
            "types": len(graph.types),
            "functions": len(graph.functions),
            "methods": sum(len(t.methods) for t in graph.types),
            "placeholder_bodies": _placeholder_count(graph),
            "removed": len(removed),
            "written": len(written),
        },
        "types": [t.name for t in graph.types],
        "failures": graph.failures,
        "diagnostics": graph.diagnostics,
        "written": written,
    }
