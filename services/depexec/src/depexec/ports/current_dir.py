from pathlib import Path
from typing import Protocol


class CurrentDirPort(Protocol):
    def get_current_dir(self) -> Path: ...
