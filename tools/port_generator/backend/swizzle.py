from dataclasses import dataclass
from itertools import product
from typing import Tuple


COMPONENTS = ("X", "Y", "Z", "W")


@dataclass(frozen=True)
class Swizzle:
    name: str
    indices: Tuple[int, ...]

    @property
    def length(self):
        return len(self.indices)


def swizzle_accessors(dims, max_len=None):
    """All swizzles over the first ``dims`` components, lengths 2..max_len.

    Each length contributes ``dims ** length`` accessors in lexicographic
    component order (XX, XY, ..., WW).
    """
    if not 2 <= dims <= len(COMPONENTS):
        raise ValueError(f"swizzle dimensionality must be 2..{len(COMPONENTS)}, got {dims}")
    max_len = dims if max_len is None else max_len
    if not 2 <= max_len <= dims:
        raise ValueError(f"swizzle length must be 2..{dims}, got {max_len}")
    out = []
    for length in range(2, max_len + 1):
        for combo in product(range(dims), repeat=length):
            out.append(Swizzle("".join(COMPONENTS[i] for i in combo), combo))
    return out


def swizzle_count(dims):
    return sum(dims ** length for length in range(2, dims + 1))
