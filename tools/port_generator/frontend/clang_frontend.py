import os
import subprocess
from pathlib import Path

from .cursor import (
    CLASS,
    FIELD,
    FUNCTION,
    METHOD,
    NAMESPACE,
    OTHER,
    PARAM,
    RECORD_KINDS,
    STRUCT,
    UNION,
    SourceCursor,
    SourceParseError,
)


KIND_NAMES = {
    "STRUCT_DECL": STRUCT,
    "CLASS_DECL": CLASS,
    "UNION_DECL": UNION,
    "FIELD_DECL": FIELD,
    "CXX_METHOD": METHOD,
    "FUNCTION_DECL": FUNCTION,
    "PARM_DECL": PARAM,
    "NAMESPACE": NAMESPACE,
}

_GCC_INCLUDE_CACHE = None


def _configure_libclang(cindex):
    if getattr(cindex.Config, "loaded", False):
        return

    # Respect explicit override first.
    explicit = os.environ.get("LIBCLANG_PATH") or os.environ.get("PORT_GENERATOR_LIBCLANG")
    if explicit:
        p = Path(explicit)
        if p.is_file():
            cindex.Config.set_library_file(str(p))
            return
        if p.is_dir():
            cindex.Config.set_library_path(str(p))
            return

    # Next, look for libclang shipped with the python clang package.
    import clang  # type: ignore

    clang_root = Path(getattr(clang, "__file__", "")).resolve().parent
    candidates = sorted(clang_root.glob("**/libclang.so*"))
    if not candidates:
        return
    # Prefer exact soname if present, otherwise latest lexical match.
    preferred = None
    for c in candidates:
        if c.name == "libclang.so":
            preferred = c
            break
    cindex.Config.set_library_file(str(preferred or candidates[-1]))


def _discover_gcc_include_dir():
    global _GCC_INCLUDE_CACHE
    if _GCC_INCLUDE_CACHE is not None:
        return _GCC_INCLUDE_CACHE
    try:
        proc = subprocess.run(
            ["gcc", "-print-file-name=include"],
            check=False,
            capture_output=True,
            text=True,
        )
    except OSError:
        _GCC_INCLUDE_CACHE = ""
        return _GCC_INCLUDE_CACHE
    candidate = (proc.stdout or "").strip() if proc.returncode == 0 else ""
    _GCC_INCLUDE_CACHE = candidate if candidate and Path(candidate).exists() else ""
    return _GCC_INCLUDE_CACHE


def _augment_compile_args_for_clang(compile_args):
    args = list(compile_args or [])
    if any(a == "-isystem" for a in args):
        return args
    gcc_include = _discover_gcc_include_dir()
    if gcc_include:
        args = [*args, "-isystem", gcc_include]
    return args


class ClangCursor(SourceCursor):
    """SourceCursor backed by a clang.cindex.Cursor."""

    def __init__(self, cursor):
        self._cursor = cursor

    @property
    def kind(self):
        try:
            name = self._cursor.kind.name
        except ValueError:
            # cindex raises for cursor kinds newer than the bindings.
            return OTHER
        return KIND_NAMES.get(name, OTHER)

    @property
    def spelling(self):
        if self.is_anonymous():
            return ""
        return self._cursor.spelling or ""

    @property
    def type_spelling(self):
        return self._cursor.type.spelling

    @property
    def result_type_spelling(self):
        return self._cursor.result_type.spelling

    @property
    def source_file(self):
        f = self._cursor.location.file
        return str(Path(str(f)).resolve()) if f else None

    def children(self):
        return [ClangCursor(ch) for ch in self._cursor.get_children()]

    def is_definition(self):
        return self._cursor.is_definition()

    def is_anonymous(self):
        if self.kind not in RECORD_KINDS:
            return False
        return self._cursor.is_anonymous()

    def is_bitfield(self):
        return self.kind == FIELD and self._cursor.is_bitfield()

    def is_static(self):
        return self.kind == METHOD and self._cursor.is_static_method()

    def is_public(self):
        access = self._cursor.access_specifier.name
        if access == "PUBLIC":
            return True
        if access in {"INVALID", "NONE"}:
            return self._cursor.linkage.name == "EXTERNAL"
        return False

    def size(self):
        return self._cursor.type.get_size()

    def offset_of(self, field_name):
        # libclang reports field offsets in bits.
        bits = self._cursor.type.get_offset(field_name)
        if bits < 0 or bits % 8:
            return -1
        return bits // 8

    def tokens(self):
        return [t.spelling for t in self._cursor.get_tokens()]

    def definition(self):
        found = self._cursor.get_definition()
        return ClangCursor(found) if found is not None else None


class ClangSourceIndex:
    """Parses C++ headers with libclang and hands back root cursors."""

    def __init__(self, compile_args=None):
        from clang import cindex  # type: ignore

        _configure_libclang(cindex)
        self._cindex = cindex
        self._index = cindex.Index.create()
        self.compile_args = _augment_compile_args_for_clang(compile_args)

    def parse(self, path):
        path = Path(path)
        if not path.is_file():
            raise SourceParseError(str(path), "not a readable file")
        try:
            tu = self._index.parse(str(path), args=self.compile_args)
        except self._cindex.TranslationUnitLoadError as err:
            raise SourceParseError(str(path), f"clang parse failed: {err}") from err

        errors = [d for d in tu.diagnostics if d.severity >= self._cindex.Diagnostic.Error]
        if errors:
            first = errors[0]
            raise SourceParseError(
                str(path),
                f"{len(errors)} error diagnostic(s), first at line {first.location.line}: {first.spelling}",
            )
        return ClangCursor(tu.cursor)
