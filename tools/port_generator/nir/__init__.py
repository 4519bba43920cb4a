from .entities import EntityGraph, FieldInfo, FunctionInfo, MethodInfo, ParamInfo, TypeInfo
from .type_map import map_type
from .builder import collect_entities, collect_files

__all__ = [
    "EntityGraph",
    "FieldInfo",
    "FunctionInfo",
    "MethodInfo",
    "ParamInfo",
    "TypeInfo",
    "map_type",
    "collect_entities",
    "collect_files",
]
