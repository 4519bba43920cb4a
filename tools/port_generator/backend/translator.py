"""Token-level C++ -> C# body translation.

A body is handled as the clang token stream between its outer braces and run
through RULES in order. A rule either rewrites the token list or raises
UnsupportedConstruct; in the latter case the whole body becomes a throwing
placeholder so nothing is emitted with guessed semantics.
"""

import re
from dataclasses import dataclass
from typing import Optional

from nir.type_map import PRIMITIVES, family_name, strip_type_prefix


PLACEHOLDER_BODY = "throw new NotImplementedException();"
INDENT = "    "

IDENT_RE = re.compile(r"^@?[A-Za-z_]\w*$")
PREFIXED_TYPE_RE = re.compile(r"^TS[A-Z]\w*$")

UNSUPPORTED = {
    "::": "scope resolution",
    "goto": "goto",
    "sizeof": "sizeof",
    "new": "heap allocation",
    "delete": "heap deallocation",
    "template": "template",
    "typename": "dependent type",
    "reinterpret_cast": "reinterpret_cast",
    "const_cast": "const_cast",
    "dynamic_cast": "dynamic_cast",
    "operator": "operator call syntax",
    "unsigned": "unsigned integer declaration",
    "long": "platform-width integer",
    "static": "static local",
    "throw": "exception",
    "try": "exception handling",
    "#": "preprocessor directive",
    "&": "address-of or reference",
}

KEYWORDS = {
    "auto", "break", "case", "const", "continue", "default", "do", "else",
    "false", "for", "if", "new", "null", "return", "switch", "this", "true",
    "var", "while",
}

# Tokens after which '*', '-', '+' and '&' act as prefix operators.
PREFIX_CONTEXT = {
    None, "(", "[", ",", "=", "+=", "-=", "*=", "/=", "%=", "return", "?", ":",
    ";", "{", "}", "+", "-", "*", "/", "%", "<", ">", "<=", ">=", "==", "!=",
    "&&", "||", "!", "case",
}

LITERALS = {
    "nullptr": "null",
    "NULL": "null",
    "TRUE": "true",
    "FALSE": "false",
}

STATEMENT_START = {None, ";", "{", "}", "const"}

# C++ identifiers that are reserved in C# and need a verbatim @ prefix.
CSHARP_KEYWORDS = {
    "abstract", "as", "base", "checked", "decimal", "delegate", "event",
    "explicit", "finally", "fixed", "foreach", "implicit", "in", "interface",
    "internal", "is", "lock", "object", "out", "override", "params",
    "readonly", "ref", "sealed", "stackalloc", "string", "typeof",
    "unchecked", "unsafe", "using", "virtual",
}

SIGNS = {"-", "+", "--", "++"}


class UnsupportedConstruct(Exception):
    pass


@dataclass(frozen=True)
class BodyTranslation:
    text: str
    reason: Optional[str] = None

    @property
    def translated(self):
        return self.reason is None


def _is_ident(tok):
    return bool(tok) and IDENT_RE.match(tok) is not None and tok not in KEYWORDS


def _prev(tokens, i):
    return tokens[i - 1] if i > 0 else None


def _next(tokens, i):
    return tokens[i + 1] if i + 1 < len(tokens) else None


def reject_unsupported(tokens):
    for i, tok in enumerate(tokens):
        if tok in UNSUPPORTED:
            raise UnsupportedConstruct(UNSUPPORTED[tok])
        if tok == "*" and _prev(tokens, i) in PREFIX_CONTEXT and _next(tokens, i) != "this":
            raise UnsupportedConstruct("pointer dereference")
        if (
            _is_ident(tok)
            and _is_ident(_next(tokens, i))
            and i + 2 < len(tokens)
            and tokens[i + 2] in {"(", "{", "["}
            and _prev(tokens, i) in STATEMENT_START
        ):
            raise UnsupportedConstruct("declaration without C# equivalent")
    return tokens


def escape_identifier(name):
    return f"@{name}" if name in CSHARP_KEYWORDS else name


def escape_keywords(tokens):
    return [escape_identifier(tok) for tok in tokens]


def rewrite_arrow(tokens):
    return ["." if tok == "->" else tok for tok in tokens]


def rewrite_this_deref(tokens):
    out = []
    for i, tok in enumerate(tokens):
        if tok == "*" and _next(tokens, i) == "this" and _prev(tokens, i) in PREFIX_CONTEXT:
            continue
        out.append(tok)
    return out


def rewrite_literals(tokens):
    return [LITERALS.get(tok, tok) for tok in tokens]


def rewrite_static_cast(tokens):
    out = []
    i = 0
    while i < len(tokens):
        if tokens[i] == "static_cast":
            window = tokens[i + 1 : i + 5]
            if len(window) == 4 and window[0] == "<" and window[2] == ">" and window[3] == "(":
                target = PRIMITIVES.get(window[1])
                if target is None or target == "void":
                    raise UnsupportedConstruct(f"static_cast to {window[1]}")
                out.extend(["(", target, ")", "("])
                i += 5
                continue
            raise UnsupportedConstruct("static_cast")
        out.append(tokens[i])
        i += 1
    return out


def rewrite_primitive_casts(tokens):
    out = []
    for i, tok in enumerate(tokens):
        target = PRIMITIVES.get(tok)
        if target is None or target == "void":
            out.append(tok)
            continue
        if _next(tokens, i) == "(" and not _is_ident(_prev(tokens, i)):
            if target == "bool":
                raise UnsupportedConstruct("bool conversion")
            out.extend(["(", target, ")"])
        else:
            out.append(target)
    return out


def drop_const(tokens):
    return [tok for tok in tokens if tok != "const"]


def rewrite_auto(tokens):
    return ["var" if tok == "auto" else tok for tok in tokens]


def rewrite_type_names(tokens):
    out = []
    for i, tok in enumerate(tokens):
        name = tok
        if PREFIXED_TYPE_RE.match(tok):
            name = strip_type_prefix(tok)
        mapped = family_name(name)
        is_type = mapped is not None or name != tok
        if mapped:
            name = mapped
        prev = out[-1] if out else None
        if is_type and _next(tokens, i) == "(" and not _is_ident(prev) and prev != "new":
            out.append("new")
        out.append(name)
    return out


RULES = [
    ("reject", reject_unsupported),
    ("keywords", escape_keywords),
    ("arrow", rewrite_arrow),
    ("this-deref", rewrite_this_deref),
    ("literals", rewrite_literals),
    ("static-cast", rewrite_static_cast),
    ("primitive-cast", rewrite_primitive_casts),
    ("const", drop_const),
    ("auto", rewrite_auto),
    ("type-names", rewrite_type_names),
]


def extract_body_tokens(tokens):
    """Slice the tokens strictly inside the first brace-delimited body.

    Returns None when there is no body or its braces never balance.
    """
    try:
        start = tokens.index("{")
    except ValueError:
        return None
    depth = 0
    for i in range(start, len(tokens)):
        if tokens[i] == "{":
            depth += 1
        elif tokens[i] == "}":
            depth -= 1
            if depth == 0:
                return list(tokens[start + 1 : i])
    return None


def _join(tokens):
    parts = []
    prev = None
    glue = True
    for tok in tokens:
        if tok in SIGNS and prev in SIGNS and prev[-1] == tok[0]:
            # Keep "- -x" from reading back as a decrement.
            sep = " "
        elif glue or tok in {")", "]", ",", ";", "."}:
            sep = ""
        elif tok in {"++", "--"} and (_is_ident(prev) or prev in {")", "]"}):
            sep = ""
        elif tok in {"(", "["} and (_is_ident(prev) or prev in {")", "]"}):
            sep = ""
        else:
            sep = " "
        parts.append(sep + tok)
        glue = tok in {"(", "[", ".", "!", "~"} or (
            tok in {"-", "+", "++", "--"} and prev in PREFIX_CONTEXT
        )
        prev = tok
    return "".join(parts)


def format_statements(tokens):
    """Lay tokens out one statement per line with brace indentation."""
    lines = []
    cur = []
    depth = 0
    paren = 0

    def flush():
        if cur:
            text = _join(cur)
            if text != ";":
                lines.append(INDENT * depth + text)
            cur.clear()

    for tok in tokens:
        if tok == "(":
            paren += 1
        elif tok == ")":
            paren -= 1
            if paren < 0:
                raise UnsupportedConstruct("unbalanced parentheses")
        if tok == "{":
            cur.append(tok)
            flush()
            depth += 1
        elif tok == "}":
            flush()
            depth -= 1
            if depth < 0:
                raise UnsupportedConstruct("unbalanced braces")
            cur.append(tok)
            flush()
        elif tok == ";" and paren == 0:
            if cur:
                cur.append(tok)
            flush()
        else:
            cur.append(tok)
    flush()
    if paren != 0 or depth != 0:
        raise UnsupportedConstruct("unbalanced body")
    return lines


def translate_body(tokens):
    """Translate a body token stream into a BodyTranslation."""
    body = extract_body_tokens(list(tokens or []))
    if body is None:
        return BodyTranslation(PLACEHOLDER_BODY, "no body")
    try:
        for _name, rule in RULES:
            body = rule(body)
        lines = format_statements(body)
    except UnsupportedConstruct as err:
        return BodyTranslation(PLACEHOLDER_BODY, str(err))
    return BodyTranslation("\n".join(lines))
