"""
Batch generation of OSL shaders for a whole node library.

Every node definition of a LibraryDocument is wrapped into a temporary node
instance, generated to a .osl file and compiled to a .oso file next to it.
Each definition is handled by compile_definition(), which depends only on
the definition and a shared BatchContext; BatchCompiler.run() owns the loop,
the consolidated log file and the aggregated result.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum, auto
from pathlib import Path
from typing import List, Optional

from .codegen import GenContext, NetworkShaderGenerator, INCLUDE_PATHS_ATTRIBUTE, strip_prefix
from .errors import CompileError, SetupError, UnsupportedDefinition
from .ir.library import LibraryDocument, NodeDef
from .logger import open_batch_log, close_batch_log
from .runtime import OslCompiler, OSL_EXTENSION

logger = logging.getLogger(__name__)

LOG_FILE_NAME = "genoslnodes_libs_to_oso.txt"


class BuildStatus(Enum):
    GENERATED = auto()
    SKIPPED = auto()
    FAILED = auto()


@dataclass
class BuildResult:
    """Outcome of one node definition."""
    nodedef_name: str
    name: str
    status: BuildStatus
    source_path: Optional[Path] = None
    artifact_path: Optional[Path] = None
    error: Optional[Exception] = None


@dataclass
class BatchReport:
    results: List[BuildResult] = field(default_factory=list)
    log_path: Optional[Path] = None

    def _with_status(self, status: BuildStatus) -> List[BuildResult]:
        return [r for r in self.results if r.status == status]

    @property
    def generated(self) -> List[BuildResult]:
        return self._with_status(BuildStatus.GENERATED)

    @property
    def skipped(self) -> List[BuildResult]:
        return self._with_status(BuildStatus.SKIPPED)

    @property
    def failed(self) -> List[BuildResult]:
        return self._with_status(BuildStatus.FAILED)

    @property
    def success(self) -> bool:
        return not self.failed


@dataclass
class BatchContext:
    """Read-only state shared by every iteration of a batch."""
    document: LibraryDocument
    output_path: Path
    compiler: OslCompiler
    generator: NetworkShaderGenerator
    gen_context: GenContext
    prefix: str = ""


def public_name(nodedef_name: str, prefix: str = "", nodedef_prefix: str = "ND_") -> str:
    """Name of the generated shader: 'ND_' stripped, user prefix prepended."""
    name = strip_prefix(nodedef_name, nodedef_prefix)
    if prefix:
        name = f"{prefix}_{name}"
    return name


def compile_definition(nodedef: NodeDef, ctx: BatchContext) -> BuildResult:
    """
    Generate and compile the shader of a single node definition.

    Never raises for generation or compilation problems; they are returned
    as a FAILED result. The temporary node instance is always removed from
    the shared document again.
    """
    name = public_name(nodedef.name, ctx.prefix, ctx.generator.variant.nodedef_prefix)
    target = ctx.generator.target

    if nodedef.get_implementation(target) is None:
        return BuildResult(
            nodedef.name, name, BuildStatus.SKIPPED,
            error=UnsupportedDefinition(
                f"The following NodeDef does not provide a valid {target} implementation, "
                f"and will be skipped: {name}",
                nodedef_name=nodedef.name,
                target=target,
            ),
        )

    source_path = ctx.output_path / f"{name}{OSL_EXTENSION}"
    node = None
    try:
        node = ctx.document.add_node_instance(nodedef, name)
        shader = ctx.generator.generate(node.name, node, ctx.gen_context)

        source_path.write_text(shader.get_source_code(), encoding="utf-8")

        include_paths = [p for p in shader.get_attribute(INCLUDE_PATHS_ATTRIBUTE, "").split(",") if p]
        artifact_path = ctx.compiler.compile(source_path, extra_include_paths=include_paths)
    except Exception as e:
        # Any per-definition failure is reported; the batch moves on
        return BuildResult(nodedef.name, name, BuildStatus.FAILED, source_path=source_path, error=e)
    finally:
        if node is not None:
            ctx.document.remove_child(node.name)

    return BuildResult(
        nodedef.name, name, BuildStatus.GENERATED,
        source_path=source_path, artifact_path=artifact_path,
    )


class BatchCompiler:
    """
    Generates and compiles one OSL shader per node definition of a library.

    Example:
        batch = BatchCompiler(document, "build/oso", OslCompiler("oslc", ["include"]))
        report = batch.run()
        sys.exit(0 if report.success else 1)
    """

    def __init__(self, document: LibraryDocument, output_path, compiler: OslCompiler,
                 prefix: str = "", generator: Optional[NetworkShaderGenerator] = None,
                 gen_context: Optional[GenContext] = None, log_name: str = LOG_FILE_NAME):
        self.document = document
        self.output_path = Path(output_path)
        self.compiler = compiler
        self.prefix = prefix or ""
        self.generator = generator or NetworkShaderGenerator()
        self.gen_context = gen_context or GenContext()
        self.log_name = log_name

    @property
    def log_path(self) -> Path:
        return self.output_path / self.log_name

    def context(self) -> BatchContext:
        return BatchContext(
            document=self.document,
            output_path=self.output_path,
            compiler=self.compiler,
            generator=self.generator,
            gen_context=self.gen_context,
            prefix=self.prefix,
        )

    def run(self) -> BatchReport:
        """
        Process every NodeDef in catalog order and write the log file.

        Raises:
            SetupError: if the log file cannot be created
        """
        ctx = self.context()
        report = BatchReport(log_path=self.log_path)

        try:
            batch_log = open_batch_log(self.log_path)
        except OSError as e:
            raise SetupError(
                f"Unable to create the log file {self.log_path}: {e}", path=str(self.log_path)
            ) from e

        try:
            for nodedef in self.document.get_nodedefs():
                result = compile_definition(nodedef, ctx)
                self._log_result(batch_log, result)
                report.results.append(result)
        finally:
            close_batch_log(batch_log)

        logger.info(
            f"Processed {len(report.results)} NodeDefs: {len(report.generated)} compiled, "
            f"{len(report.skipped)} skipped, {len(report.failed)} failed"
        )
        if not report.success:
            logger.error(
                "Failed to codegen and compile all the OSL shaders associated to the provided "
                f"MaterialX libraries, see the log file for more details: {self.log_path}"
            )
        return report

    def _log_result(self, batch_log: logging.Logger, result: BuildResult):
        if result.status == BuildStatus.SKIPPED:
            batch_log.info(str(result.error))
        elif result.status == BuildStatus.GENERATED:
            batch_log.info(f"Compiled {result.nodedef_name} to {result.artifact_path}")
        elif isinstance(result.error, CompileError):
            batch_log.error(
                f"Encountered a codegen/compilation related exception for the following node: {result.name}"
            )
            batch_log.error(result.error.format_with_log())
        else:
            batch_log.error(f"Failed to codegen/compile the following node to OSL: {result.name}")
            batch_log.error(f"{type(result.error).__name__}: {result.error}")
