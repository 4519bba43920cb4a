import re


TYPE_PREFIX = "TS"
PLACEHOLDER = "object"

PRIMITIVES = {
    "float": "float",
    "double": "double",
    "bool": "bool",
    "void": "void",
    "int": "int",
    "signed int": "int",
    "char": "sbyte",
    "signed char": "sbyte",
    "unsigned char": "byte",
    "short": "short",
    "unsigned short": "ushort",
    "unsigned": "uint",
    "unsigned int": "uint",
    "long long": "long",
    "unsigned long long": "ulong",
    "int8": "sbyte",
    "uint8": "byte",
    "int16": "short",
    "uint16": "ushort",
    "int32": "int",
    "uint32": "uint",
    "int64": "long",
    "uint64": "ulong",
}

# Element types C# accepts in fixed-size buffers.
FIXED_BUFFER_TYPES = {"bool", "byte", "sbyte", "short", "ushort", "int", "uint", "long", "ulong", "float", "double"}

FAMILIES = (
    ("TSVector", "Vector"),
    ("TSMatrix", "Matrix"),
    ("TSQuaternion", "Quaternion"),
    ("Vector", "Vector"),
    ("Matrix", "Matrix"),
    ("Quaternion", "Quaternion"),
)

QUALIFIER_RE = re.compile(r"\b(?:const|volatile)\b")
ELABORATION_RE = re.compile(r"^(?:struct|class|union)\s+")
NAMESPACE_RE = re.compile(r"\b[A-Za-z_]\w*::")
ARRAY_RE = re.compile(r"^(.*?)\s*((?:\[\d+\])+)$")
SUFFIX_RE = re.compile(r"^(?:\d+(?:x\d+)?D?)?$")


def normalize_spelling(spelling):
    s = " ".join(str(spelling or "").split())
    s = QUALIFIER_RE.sub("", s)
    s = " ".join(s.split())
    while s.endswith("&"):
        s = s[:-1].rstrip()
    s = ELABORATION_RE.sub("", s)
    s = NAMESPACE_RE.sub("", s)
    return " ".join(s.split())


def family_name(name):
    """Target family name for a library type identifier, or None."""
    for prefix, target in FAMILIES:
        if name.startswith(prefix):
            suffix = name[len(prefix):]
            if SUFFIX_RE.match(suffix):
                return target + suffix
    return None


def map_type(spelling):
    s = normalize_spelling(spelling)
    if not s or "*" in s:
        return PLACEHOLDER

    prim = PRIMITIVES.get(s)
    if prim:
        return prim

    m = ARRAY_RE.match(s)
    if m:
        elem = PRIMITIVES.get(normalize_spelling(m.group(1)))
        if elem not in FIXED_BUFFER_TYPES:
            return PLACEHOLDER
        length = 1
        for dim in re.findall(r"\d+", m.group(2)):
            length *= int(dim)
        return f"{elem}[{length}]"

    return family_name(s) or PLACEHOLDER


def is_placeholder(target_type):
    return target_type == PLACEHOLDER


def param_modifier(spelling):
    s = " ".join(str(spelling or "").split())
    if s.endswith("&") and not s.endswith("&&") and not QUALIFIER_RE.search(s):
        return "ref"
    return ""


def strip_type_prefix(name):
    if name.startswith(TYPE_PREFIX) and len(name) > len(TYPE_PREFIX):
        return name[len(TYPE_PREFIX):]
    return name
