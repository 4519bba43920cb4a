from dataclasses import dataclass, field
from typing import Optional, Tuple


@dataclass(frozen=True)
class FieldInfo:
    name: str
    source_type: str
    target_type: str
    offset: int


@dataclass(frozen=True)
class ParamInfo:
    name: str
    source_type: str
    target_type: str


@dataclass(frozen=True)
class MethodInfo:
    name: str
    source_return_type: str
    target_return_type: str
    params: Tuple[ParamInfo, ...]
    is_static: bool
    translated_body: str
    untranslated_reason: Optional[str] = None

    @property
    def identity(self):
        return signature_identity(self.name, self.params)


@dataclass(frozen=True)
class FunctionInfo:
    name: str
    source_return_type: str
    target_return_type: str
    params: Tuple[ParamInfo, ...]
    translated_body: str
    untranslated_reason: Optional[str] = None

    @property
    def identity(self):
        return signature_identity(self.name, self.params)


@dataclass(frozen=True)
class TypeInfo:
    name: str
    size: int
    fields: Tuple[FieldInfo, ...] = ()
    methods: Tuple[MethodInfo, ...] = ()
    source: Optional[str] = None


def signature_identity(name, params):
    """Structural identity used to collapse repeated declarations."""
    return (name, tuple(p.target_type for p in params))


@dataclass
class EntityGraph:
    """Append-only result of one collection pass over all inputs."""

    types: list = field(default_factory=list)
    functions: list = field(default_factory=list)
    diagnostics: list = field(default_factory=list)
    failures: list = field(default_factory=list)
    _type_names: set = field(default_factory=set, repr=False)
    _function_ids: set = field(default_factory=set, repr=False)

    def add_type(self, type_info):
        if type_info.name in self._type_names:
            return False
        self._type_names.add(type_info.name)
        self.types.append(type_info)
        return True

    def has_function(self, identity):
        return identity in self._function_ids

    def add_function(self, function_info):
        if function_info.identity in self._function_ids:
            return False
        self._function_ids.add(function_info.identity)
        self.functions.append(function_info)
        return True

    def diag(self, code, message, severity="warning"):
        self.diagnostics.append({"severity": severity, "code": code, "message": message})

    def fail(self, source, error):
        self.failures.append({"source": str(source).replace("\\", "/"), "error": str(error)})
