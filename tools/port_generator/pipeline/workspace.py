import os
import shutil
from pathlib import Path


MANIFEST_SUFFIX = ".csproj"


class WorkspaceError(RuntimeError):
    pass


class OutputWorkspace:
    """Output directory owned by a single generator run."""

    def __init__(self, root, manifest_suffix=MANIFEST_SUFFIX):
        self.root = Path(root)
        self.manifest_suffix = manifest_suffix

    def prepare(self):
        try:
            self.root.mkdir(parents=True, exist_ok=True)
        except OSError as err:
            raise WorkspaceError(f"cannot create output directory {self.root}: {err}") from err
        if not self.root.is_dir():
            raise WorkspaceError(f"output path is not a directory: {self.root}")
        if not os.access(self.root, os.W_OK | os.X_OK):
            raise WorkspaceError(f"output directory is not writable: {self.root}")

    def is_manifest(self, path):
        return path.is_file() and path.name.lower().endswith(self.manifest_suffix)

    def clear(self):
        """Remove previous output, keeping the build manifest."""
        removed = []
        for entry in sorted(self.root.iterdir()):
            if self.is_manifest(entry):
                continue
            if entry.is_dir() and not entry.is_symlink():
                shutil.rmtree(entry)
            else:
                entry.unlink()
            removed.append(entry.name)
        return removed

    def write(self, name, text):
        path = self.root / name
        path.write_text(text, encoding="utf-8")
        return path
