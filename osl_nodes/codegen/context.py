from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional


@dataclass
class GenOptions:
    """Options of one generation run."""
    # Test support: wire the last node into a synthetic sink shader
    connect_sink: bool = False
    float_precision: int = 6


class GenContext:
    """
    Shared configuration passed to every generate() call.

    Holds the options and the search path used to resolve relative
    implementation source files.
    """
    def __init__(self, options: Optional[GenOptions] = None,
                 source_search_path: Optional[Iterable[Path]] = None):
        self.options = options or GenOptions()
        self.source_search_path: List[Path] = [Path(p) for p in (source_search_path or [])]

    def resolve_source(self, file: str) -> Path:
        """
        Resolve an implementation source file to an absolute path.

        Relative files are looked up along the search path in order; a file
        that cannot be found resolves against the current directory.
        """
        path = Path(file)
        if not path.is_absolute():
            for root in self.source_search_path:
                candidate = root / path
                if candidate.exists():
                    return candidate.resolve()
        return path.resolve()
