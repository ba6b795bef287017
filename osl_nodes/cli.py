"""
libs-to-oso: generate and compile an OSL shader for every MaterialX node definition.

Usage
-----
    libs-to-oso --outputPath build/oso --oslCompilerPath /usr/bin/oslc \\
                --oslIncludePath /usr/share/OSL/shaders [--libraries stdlib,pbrlib] [--prefix mx]

Exit codes
----------
    0   every eligible node definition was generated and compiled
    1   invalid paths, or at least one node definition failed (see the log
        file in the output directory)
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional, Tuple

from . import __version__
from .batch import BatchCompiler
from .codegen import GenContext, NetworkShaderGenerator, OSL_NODES
from .errors import OslNodesError, SetupError
from .logger import setup_logger, log_info, log_error
from .runtime import OslCompiler

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="libs-to-oso",
        description=f"osl_nodes - LibsToOso version {__version__}",
    )
    p.add_argument("--outputPath", dest="output_path", default="", metavar="DIRPATH",
                   help="Directory receiving the .osl/.oso files and the log file (created if absent)")
    p.add_argument("--oslCompilerPath", dest="osl_compiler_path", default="", metavar="FILEPATH",
                   help="Path to the oslc executable")
    p.add_argument("--oslIncludePath", dest="osl_include_path", default="", metavar="DIRPATH",
                   help="Directory holding the OSL standard headers (stdosl.h)")
    p.add_argument("--libraries", dest="libraries", default="", metavar="STRING",
                   help="Comma separated MaterialX libraries to load; 'targets' is always loaded. "
                        "Loads every library when omitted")
    p.add_argument("--prefix", dest="prefix", default="", metavar="STRING",
                   help="Prefix prepended to every shader name")
    return p


def validate_setup(args: argparse.Namespace) -> Tuple[Path, Path, Path]:
    """
    Check the paths given on the command line.

    Returns:
        (output_path, osl_compiler_path, osl_include_path)

    Raises:
        SetupError: on the first unusable path
    """
    if not args.output_path:
        raise SetupError("No output path was provided")
    output_path = Path(args.output_path)
    if not output_path.is_dir():
        try:
            output_path.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise SetupError(
                f"Failed to find and/or create the provided output path: {output_path} ({e})",
                path=str(output_path),
            ) from e
        if not output_path.is_dir():
            raise SetupError(
                f"Failed to find and/or create the provided output path: {output_path}",
                path=str(output_path),
            )

    compiler_path = Path(args.osl_compiler_path)
    if not args.osl_compiler_path or not compiler_path.exists():
        raise SetupError(
            f"The provided path to the OSL compiler is not valid: {args.osl_compiler_path}",
            path=args.osl_compiler_path,
        )

    include_path = Path(args.osl_include_path)
    if not args.osl_include_path or not include_path.is_dir():
        raise SetupError(
            f"The provided path to the OSL includes is not valid: {args.osl_include_path}",
            path=args.osl_include_path,
        )

    return output_path, compiler_path, include_path


def main(argv: Optional[List[str]] = None) -> int:
    setup_logger()
    args = build_parser().parse_args(argv)

    log_info("osl_nodes - LibsToOso")
    log_info(f"\toutputPath: {args.output_path}")
    log_info(f"\toslCompilerPath: {args.osl_compiler_path}")
    log_info(f"\toslIncludePath: {args.osl_include_path}")
    log_info(f"\tlibraries: {args.libraries}")
    log_info(f"\tprefix: {args.prefix}")

    try:
        output_path, compiler_path, include_path = validate_setup(args)
    except SetupError as e:
        log_error(str(e))
        return 1

    # MaterialX is only needed once there is work to do
    from .graph_extract.mtlx import load_libraries

    generator = NetworkShaderGenerator(OSL_NODES)
    try:
        loaded = load_libraries(args.libraries or None, [generator.target])
    except OslNodesError as e:
        log_error(f"Failed to load the MaterialX libraries: {e}")
        return 1

    include_paths = [include_path]
    if loaded.genosl_include is not None:
        include_paths.append(loaded.genosl_include)

    batch = BatchCompiler(
        loaded.document,
        output_path,
        OslCompiler(compiler_path, include_paths),
        prefix=args.prefix,
        generator=generator,
        gen_context=GenContext(source_search_path=loaded.source_search_path),
    )
    try:
        report = batch.run()
    except SetupError as e:
        log_error(str(e))
        return 1

    if not report.success:
        return 1
    log_info(f"All OSL shaders written to {output_path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
