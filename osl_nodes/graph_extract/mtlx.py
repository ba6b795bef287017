"""
MaterialX library loading.

Loads the MaterialX data libraries through the MaterialX Python package and
converts their node definitions into a LibraryDocument. Only the parts of
the MaterialX object model that the network generator reads are carried
over: definition names, ports, default values and per-target
implementations.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Optional

import MaterialX as mx

from ..errors import SetupError
from ..ir.library import Implementation, LibraryDocument, NodeDef, PortDef
from ..ir.types import parse_value

logger = logging.getLogger(__name__)

# Always loaded so that target definitions are known
TARGETS_LIBRARY = "targets"
LIBRARIES_ROOT = "libraries"
GENOSL_INCLUDE = "libraries/stdlib/genosl/include"

# MaterialX joins search path entries with ';' on every platform
SEARCH_PATH_SEPARATOR = ";"


@dataclass
class LoadedLibraries:
    document: LibraryDocument
    source_search_path: List[Path] = field(default_factory=list)
    genosl_include: Optional[Path] = None


def library_folders(libraries: Optional[str]) -> List[str]:
    """
    Library folders to load for a comma separated list of library names.

    Without a list every library under 'libraries' is loaded. With a list,
    the 'targets' library is always loaded first.
    """
    if not libraries:
        return [LIBRARIES_ROOT]

    folders = [f"{LIBRARIES_ROOT}/{TARGETS_LIBRARY}"]
    for library in libraries.split(","):
        library = library.strip()
        if not library or library == TARGETS_LIBRARY:
            continue
        folders.append(f"{LIBRARIES_ROOT}/{library}")
    return folders


def _convert_port(port) -> PortDef:
    type_name = port.getType()
    value_string = port.getValueString()
    try:
        value = parse_value(type_name, value_string)
    except ValueError:
        logger.warning(f"Unable to parse value '{value_string}' of {port.getName()} as {type_name}")
        value = value_string or None

    return PortDef(
        name=port.getName(),
        type=type_name,
        value=value,
        hidden=port.getAttribute("uihidden") == "true",
    )


def _resolve_file(file: str, search_path) -> str:
    if not file or search_path is None:
        return file
    resolved = search_path.find(mx.FilePath(file))
    if resolved.exists():
        return resolved.asString()
    return file


def convert_nodedef(mx_nodedef, targets: Iterable[str], search_path=None) -> NodeDef:
    """Convert a MaterialX NodeDef, keeping implementations for the given targets."""
    nodedef = NodeDef(
        name=mx_nodedef.getName(),
        node=mx_nodedef.getNodeString(),
        type=mx_nodedef.getType(),
        inputs=[_convert_port(p) for p in mx_nodedef.getActiveInputs()],
        outputs=[PortDef(p.getName(), p.getType()) for p in mx_nodedef.getActiveOutputs()],
    )

    for target in targets:
        mx_impl = mx_nodedef.getImplementation(target)
        if mx_impl is None:
            continue
        # Node graph implementations have no entry point to reference
        if mx_impl.getCategory() != "implementation":
            logger.debug(f"{nodedef.name} is implemented by node graph {mx_impl.getName()}")
            continue
        nodedef.add_implementation(Implementation(
            name=mx_impl.getName(),
            target=target,
            function=mx_impl.getAttribute("function"),
            file=_resolve_file(mx_impl.getAttribute("file"), search_path),
        ))

    return nodedef


def convert_document(mx_doc, targets: Iterable[str], search_path=None) -> LibraryDocument:
    """Convert every NodeDef of a MaterialX document into a LibraryDocument."""
    targets = list(targets)
    library = LibraryDocument(mx_doc.getName() or LIBRARIES_ROOT)
    for mx_nodedef in mx_doc.getNodeDefs():
        library.add_nodedef(convert_nodedef(mx_nodedef, targets, search_path))
    return library


def load_libraries(libraries: Optional[str], targets: Iterable[str], search_path=None) -> LoadedLibraries:
    """
    Load MaterialX data libraries from the default data search path.

    Args:
        libraries: Comma separated library names, or None for all libraries
        targets: Implementation targets to keep on each NodeDef
        search_path: Optional mx.FileSearchPath overriding the default one

    Raises:
        SetupError: if MaterialX fails to load the library folders
    """
    if search_path is None:
        search_path = mx.getDefaultDataSearchPath()

    mx_doc = mx.createDocument()
    folders = library_folders(libraries)
    logger.info(f"Loading MaterialX libraries: {', '.join(folders)}")
    try:
        mx.loadLibraries(folders, search_path, mx_doc)
    except mx.Exception as e:
        raise SetupError(f"Unable to load MaterialX libraries {', '.join(folders)}: {e}") from e

    document = convert_document(mx_doc, targets, search_path)

    source_search_path = [
        Path(p) for p in search_path.asString().split(SEARCH_PATH_SEPARATOR) if p
    ]

    genosl_include = search_path.find(mx.FilePath(GENOSL_INCLUDE))
    include_dir = Path(genosl_include.asString()) if genosl_include.exists() else None

    return LoadedLibraries(
        document=document,
        source_search_path=source_search_path,
        genosl_include=include_dir,
    )
