from pathlib import Path


class ProcessCurrentDir:
    def get_current_dir(self) -> Path:
        return Path.cwd()


class FixedCurrentDir:
    """Pins the logical base directory, e.g. for one analysis strategy."""

    def __init__(self, root: Path) -> None:
        if not root.is_absolute():
            raise ValueError(f"current directory must be absolute: {root}")
        self.root = root

    def get_current_dir(self) -> Path:
        return self.root
