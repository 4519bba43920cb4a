import re

from nir.type_map import PLACEHOLDER, family_name, param_modifier

from .swizzle import COMPONENTS, swizzle_accessors
from .translator import escape_identifier


NAMESPACE = "Terathon.Math"
UTILS_CLASS = "TerathonUtils"
INTERFACE_NAME = "IVector"
SWIZZLE_FAMILY = "Vector"
UNTRANSLATED_TAG = "// PORT: UNTRANSLATED"

FIXED_RE = re.compile(r"^(\w+)\[(\d+)\]$")

OPERATOR_NAMES = {
    "+": "Add",
    "-": "Subtract",
    "*": "Multiply",
    "/": "Divide",
    "%": "Modulo",
    "+=": "AddAssign",
    "-=": "SubtractAssign",
    "*=": "MultiplyAssign",
    "/=": "DivideAssign",
    "%=": "ModuloAssign",
    "&": "And",
    "|": "Or",
    "^": "Xor",
    "&=": "AndAssign",
    "|=": "OrAssign",
    "^=": "XorAssign",
    "<<": "ShiftLeft",
    ">>": "ShiftRight",
    "==": "Equals",
    "!=": "NotEquals",
    "<": "Less",
    ">": "Greater",
    "<=": "LessEqual",
    ">=": "GreaterEqual",
    "!": "Not",
    "~": "Complement",
    "++": "Increment",
    "--": "Decrement",
    "=": "Assign",
    "[]": "Index",
    "()": "Call",
}
UNARY_OPERATOR_NAMES = {"-": "Negate", "+": "Plus"}


def member_name(name, unary=False):
    """C# identifier for a C++ member or function name."""
    if not name.startswith("operator"):
        return name
    op = name[len("operator"):].strip()
    if unary and op in UNARY_OPERATOR_NAMES:
        return "Op" + UNARY_OPERATOR_NAMES[op]
    base = OPERATOR_NAMES.get(op)
    if base is None:
        base = "Custom" + "".join(ch for ch in op if ch.isalnum())
    return "Op" + base


def _param_type(target_type):
    m = FIXED_RE.match(target_type)
    return f"{m.group(1)}[]" if m else target_type


def _field_decl(f):
    m = FIXED_RE.match(f.target_type)
    if m:
        return f"fixed {m.group(1)} {escape_identifier(f.name)}[{m.group(2)}]"
    return f"{f.target_type} {escape_identifier(f.name)}"


def _render_routine(name, return_type, params, body, reason, modifiers, pad):
    args = []
    for i, p in enumerate(params):
        modifier = param_modifier(p.source_type)
        prefix = f"{modifier} " if modifier else ""
        args.append(f"{prefix}{_param_type(p.target_type)} {escape_identifier(p.name or f'arg{i}')}")
    lines = []
    if reason:
        lines.append(f"{pad}{UNTRANSLATED_TAG} ({reason})")
    lines.append(f"{pad}{modifiers} {_param_type(return_type)} {name}({', '.join(args)})")
    lines.append(f"{pad}{{")
    for body_line in body.splitlines():
        lines.append(f"{pad}    {body_line}" if body_line.strip() else "")
    lines.append(f"{pad}}}")
    return lines


def component_fields(type_info):
    """Leading fields named X, Y, Z, W (any case) sharing one scalar type."""
    comps = []
    for f, letter in zip(type_info.fields, COMPONENTS):
        if f.name.upper() != letter or FIXED_RE.match(f.target_type) or f.target_type == PLACEHOLDER:
            break
        if comps and f.target_type != comps[0].target_type:
            break
        if any(c.offset == f.offset for c in comps):
            break
        comps.append(f)
    return comps if len(comps) >= 2 else []


def has_swizzles(type_name, comps):
    """Swizzles are generated for float members of the Vector family only."""
    return (
        bool(comps)
        and type_name.startswith(SWIZZLE_FAMILY)
        and family_name(type_name) is not None
        and all(c.target_type == "float" for c in comps)
    )


def family_for(type_name, length):
    """Name of the ``length``-component member of ``type_name``'s family."""
    m = re.search(r"\d", type_name)
    if m is None:
        return f"Vector{length}D"
    return f"{type_name[:m.start()]}{length}{type_name[m.end():]}"


def _interface_members(t, comps, pad):
    name = t.name
    iface = f"{INTERFACE_NAME}<{name}>"

    def combine(op, rhs):
        return ", ".join(f"{c.name} {op} {rhs(c)}" for c in comps)

    dot = " + ".join(f"{c.name} * other.{c.name}" for c in comps)
    return [
        f"{pad}{name} {iface}.Zero => new {name}();",
        f"{pad}{name} {iface}.Add({name} other) => new {name}({combine('+', lambda c: 'other.' + c.name)});",
        f"{pad}{name} {iface}.Subtract({name} other) => new {name}({combine('-', lambda c: 'other.' + c.name)});",
        f"{pad}{name} {iface}.Multiply(float scalar) => new {name}({combine('*', lambda c: 'scalar')});",
        f"{pad}float {iface}.Dot({name} other) => {dot};",
    ]


def emit_struct(t, implement_interface=False):
    comps = component_fields(t)
    conforms = implement_interface and bool(comps) and all(c.target_type == "float" for c in comps)
    unsafe = any(FIXED_RE.match(f.target_type) for f in t.fields)
    header = f"public {'unsafe ' if unsafe else ''}partial struct {t.name}"
    if conforms:
        header += f" : {INTERFACE_NAME}<{t.name}>"

    pad = " " * 8
    lines = [
        "using System;",
        "using System.Runtime.InteropServices;",
        f"using static {NAMESPACE}.{UTILS_CLASS};",
        "",
        f"namespace {NAMESPACE}",
        "{",
        f"    [StructLayout(LayoutKind.Explicit, Size = {t.size})]",
        f"    {header}",
        "    {",
    ]
    for f in t.fields:
        lines.append(f"{pad}[FieldOffset({f.offset})] public {_field_decl(f)};")

    if comps:
        args = ", ".join(f"{c.target_type} {escape_identifier(c.name.lower())}" for c in comps)
        lines.append("")
        lines.append(f"{pad}public {t.name}({args}) : this()")
        lines.append(f"{pad}{{")
        for c in comps:
            lines.append(f"{pad}    this.{c.name} = {escape_identifier(c.name.lower())};")
        lines.append(f"{pad}}}")

    for m in t.methods:
        modifiers = "public static" if m.is_static else "public"
        name = member_name(m.name, unary=not m.params)
        lines.append("")
        lines.extend(
            _render_routine(name, m.target_return_type, m.params, m.translated_body, m.untranslated_reason, modifiers, pad)
        )

    if conforms:
        lines.append("")
        lines.extend(_interface_members(t, comps, pad))

    if has_swizzles(t.name, comps):
        lines.append("")
        for sw in swizzle_accessors(len(comps)):
            family = family_for(t.name, sw.length)
            args = ", ".join(f"this.{comps[i].name}" for i in sw.indices)
            lines.append(f"{pad}public {family} {sw.name} => new {family}({args});")

    lines.append("    }")
    lines.append("}")
    return "\n".join(lines) + "\n"


def emit_interfaces(enabled=True):
    if not enabled:
        return ""
    lines = [
        f"namespace {NAMESPACE}",
        "{",
        f"    public interface {INTERFACE_NAME}<T> where T : struct, {INTERFACE_NAME}<T>",
        "    {",
        "        T Zero { get; }",
        "        T Add(T other);",
        "        T Subtract(T other);",
        "        T Multiply(float scalar);",
        "        float Dot(T other);",
        "    }",
        "}",
    ]
    return "\n".join(lines) + "\n"


def emit_functions(functions):
    pad = " " * 8
    lines = [
        "using System;",
        "",
        f"namespace {NAMESPACE}",
        "{",
        f"    public static partial class {UTILS_CLASS}",
        "    {",
    ]
    for i, fn in enumerate(functions):
        if i:
            lines.append("")
        name = member_name(fn.name, unary=len(fn.params) == 1)
        lines.extend(
            _render_routine(name, fn.target_return_type, fn.params, fn.translated_body, fn.untranslated_reason, "public static", pad)
        )
    lines.append("    }")
    lines.append("}")
    return "\n".join(lines) + "\n"
