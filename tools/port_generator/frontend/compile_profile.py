import json
from pathlib import Path


DEFAULT_ARGS = ["-x", "c++", "-std=c++17"]


def load_compile_profile(path=None, include_dir=None):
    """Load the clang argument profile, falling back to the C++17 defaults.

    The profile is a JSON object with an ``args`` list. ``include_dir`` is
    appended as ``-I`` so library headers resolve their sibling includes.
    """
    if path:
        profile_path = Path(path)
        data = json.loads(profile_path.read_text(encoding="utf-8"))
        if not isinstance(data, dict):
            raise ValueError(f"Invalid compile profile {profile_path}: expected a JSON object")
        args = data.get("args")
        if not isinstance(args, list) or not all(isinstance(a, str) for a in args):
            raise ValueError(f"Invalid compile profile {profile_path}: args must be a list of strings")
        data = dict(data, args=list(args))
    else:
        data = {"args": list(DEFAULT_ARGS)}

    if include_dir:
        flag = f"-I{include_dir}"
        if flag not in data["args"]:
            data["args"].append(flag)
    return data
