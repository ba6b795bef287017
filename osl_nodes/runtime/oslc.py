"""
OslCompiler for OSL node generation.

Runs the external OSL compiler (oslc) on generated sources and turns its
failures into CompileError carrying the compiler's own diagnostics.
"""

import logging
import subprocess
from pathlib import Path
from typing import Iterable, List, Optional

from ..errors import CompileError

logger = logging.getLogger(__name__)

OSL_EXTENSION = ".osl"
OSO_EXTENSION = ".oso"


class OslCompiler:
    """
    Compiles .osl files to .oso files next to them.

    Include paths given at construction come first, followed by the paths
    passed to each compile() call. Duplicates are dropped.
    """

    def __init__(self, executable, include_paths: Iterable = (), timeout: Optional[float] = None):
        self.executable = Path(executable)
        self.include_paths: List[Path] = [Path(p) for p in include_paths]
        # No timeout unless one is asked for
        self.timeout = timeout

    def _include_args(self, extra_include_paths: Iterable) -> List[str]:
        args = []
        seen = set()
        for path in list(self.include_paths) + [Path(p) for p in extra_include_paths]:
            key = str(path)
            if not key or key in seen:
                continue
            seen.add(key)
            args.append(f"-I{key}")
        return args

    def command(self, source_path: Path, output_path: Path, extra_include_paths: Iterable = ()) -> List[str]:
        return (
            [str(self.executable), "-q"]
            + self._include_args(extra_include_paths)
            + [str(source_path), "-o", str(output_path)]
        )

    def compile(self, source_path, output_path=None, extra_include_paths: Iterable = ()) -> Path:
        """
        Compile one source file.

        Args:
            source_path: The .osl file to compile
            output_path: Destination, defaults to the source with a .oso suffix
            extra_include_paths: Additional include directories for this file

        Returns:
            Path of the compiled artifact.

        Raises:
            CompileError: if the compiler cannot run, fails, or writes nothing.
        """
        source_path = Path(source_path)
        output_path = Path(output_path) if output_path else source_path.with_suffix(OSO_EXTENSION)
        cmd = self.command(source_path, output_path, extra_include_paths)

        # A stale artifact from an earlier run must not pass for fresh output
        output_path.unlink(missing_ok=True)

        logger.debug(f"Running: {' '.join(cmd)}")
        try:
            result = subprocess.run(
                cmd, capture_output=True, text=True, errors="replace", timeout=self.timeout
            )
        except subprocess.TimeoutExpired as e:
            raise CompileError(
                f"OSL compiler timed out after {self.timeout}s on {source_path.name}",
                source_path=str(source_path),
            ) from e
        except OSError as e:
            raise CompileError(
                f"Unable to run the OSL compiler {self.executable}: {e}",
                source_path=str(source_path),
            ) from e

        error_log = [
            line for line in (result.stdout or "").splitlines() + (result.stderr or "").splitlines()
            if line.strip()
        ]

        if result.returncode != 0:
            raise CompileError(
                f"OSL compiler exited with code {result.returncode} on {source_path.name}",
                source_path=str(source_path),
                error_log=error_log,
            )

        if not output_path.exists():
            raise CompileError(
                f"OSL compiler produced no output for {source_path.name}",
                source_path=str(source_path),
                error_log=error_log,
            )

        for line in error_log:
            logger.debug(line)
        return output_path
