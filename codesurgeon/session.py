"""The Codesurgeon session: read, extract, post-process, write.

All mutable state lives in a ``SurgeonContext``; ``reset()`` swaps in a
fresh one and ``clear()`` empties parts of the current one. The output
buffer accumulates across ``extract`` calls until it is cleared.

Usage:
    surgeon = Codesurgeon(separator="\\n\\n")
    surgeon.read("lib/a.js", "lib/b.js")
    surgeon.extract("Alpha", ("exports.helper", "util"))
    surgeon.wrap(type="declaration", identifier="Mod")
    surgeon.write("dist/mod.js")

A session is not thread-safe; serialize calls from multiple threads.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Literal

from codesurgeon.config import SurgeonConfig
from codesurgeon.extraction import (
    CodeGenerator,
    OutputBuffer,
    OutputComposer,
    ResultSlots,
    TopLevelEntity,
    TopLevelMatcher,
)
from codesurgeon.parsing import AnnotatedTreeBuilder
from codesurgeon.postprocess import (
    DependencyProber,
    ProbeReport,
    StaticDependencyProber,
    ValidationProfile,
    ValidationReport,
    Validator,
    WrapOptions,
    reconcile,
    wrap,
)
from codesurgeon.postprocess.validator import ReportCallback
from codesurgeon.sources import (
    PackageMetadata,
    ReadResult,
    SourceAggregator,
    read_source,
    read_sources,
    write_output,
    write_output_async,
)
from codesurgeon.types.core import ExtractionTarget
from codesurgeon.types.errors import ConfigurationError, ErrorContext, ParseError
from codesurgeon.utils.logger import generate_session_id, logger

ClearTarget = Literal["inputs", "output"]


@dataclass
class SurgeonContext:
    """Everything a session accumulates between calls."""

    inputs: SourceAggregator
    output: OutputBuffer = field(default_factory=OutputBuffer)
    package: PackageMetadata | None = None
    failed_reads: dict[str, Exception] = field(default_factory=dict)
    last_read: str | None = None
    new_file: str | None = None
    last_slots: ResultSlots | None = None
    last_report: ValidationReport | None = None
    last_probe: ProbeReport | None = None

    @classmethod
    def fresh(cls, separator: str) -> SurgeonContext:
        return cls(inputs=SourceAggregator(separator))


class Codesurgeon:
    """Extract top-level declarations from JavaScript sources.

    Every operation returns the session so calls can be chained.
    """

    def __init__(self, config: SurgeonConfig | None = None, **options: Any):
        package = options.pop("package", None)
        self.config = (config or SurgeonConfig()).with_options(**options)
        self.session_id = generate_session_id()
        self._log = logger.bind(session=self.session_id)
        self._builder = AnnotatedTreeBuilder()
        self._matcher = TopLevelMatcher(CodeGenerator(self.config.indent_width))
        self.context = SurgeonContext.fresh(self.config.separator)
        if package is not None:
            self.package(package)

    # ----------------------------------------------------------------
    # State
    # ----------------------------------------------------------------

    @property
    def output(self) -> str:
        return self.context.output.text

    def _say(self, message: str) -> None:
        self._log.log("DEBUG" if self.config.quiet else "INFO", message)

    def configure(self, **options: Any) -> Codesurgeon:
        """Update configuration; a ``package`` key loads package metadata."""
        package = options.pop("package", None)
        if options:
            self.config = self.config.with_options(**options)
            self.context.inputs.separator = self.config.separator
            self._matcher = TopLevelMatcher(CodeGenerator(self.config.indent_width))
        if package is not None:
            self.package(package)
        return self

    def package(self, path: str | Path) -> Codesurgeon:
        """Load package.json for banners, versioned names and known deps."""
        self.context.package = PackageMetadata.load(path)
        return self

    def clear(self, which: ClearTarget | None = None) -> Codesurgeon:
        """Empty the input documents, the output buffer, or both."""
        if which not in (None, "inputs", "output"):
            raise ConfigurationError(
                f"clear() accepts 'inputs', 'output' or nothing, got {which!r}",
                context=ErrorContext(operation="clear", component="session"),
            )
        if which in (None, "inputs"):
            self.context.inputs.clear()
            self.context.failed_reads.clear()
        if which in (None, "output"):
            self.context.output.clear()
        return self

    def reset(self) -> Codesurgeon:
        """Start over with a fresh context; configuration is kept."""
        self.context = SurgeonContext.fresh(self.config.separator)
        return self

    # ----------------------------------------------------------------
    # Reading
    # ----------------------------------------------------------------

    def _register(self, result: ReadResult) -> None:
        if result.ok and result.text is not None:
            self.context.inputs.register(result.path, result.text)
            self.context.failed_reads.pop(result.path, None)
        elif result.error is not None:
            self.context.failed_reads[result.path] = result.error

    def read(self, *paths: str | Path) -> Codesurgeon:
        """Read files in order; failures are logged and recorded, not raised."""
        for path in map(str, paths):
            self._say(f"Read file [{path}]")
            self._register(read_source(path, self.config.encoding))
            self.context.last_read = path
        return self

    async def read_async(self, *paths: str | Path) -> Codesurgeon:
        """Read files concurrently, registering them in argument order."""
        names = [str(p) for p in paths]
        for path in names:
            self._say(f"Read file [{path}]")
        for result in await read_sources(names, self.config.encoding):
            self._register(result)
        if names:
            self.context.last_read = names[-1]
        return self

    def add_source(self, path: str, text: str) -> Codesurgeon:
        """Register in-memory source text as if it had been read from ``path``."""
        self.context.inputs.register(path, text)
        return self

    # ----------------------------------------------------------------
    # Extraction
    # ----------------------------------------------------------------

    def extract(self, *targets: ExtractionTarget | str | Sequence[str]) -> Codesurgeon:
        """Append the requested top-level declarations to the output buffer.

        Each target is a name or a ``(name, new_name)`` pair. With no
        targets the output buffer is replaced by the whole aggregated input.

        Raises:
            ParseError: If the aggregated input is not valid JavaScript.
            TargetError: If a target is neither a name nor a pair.
        """
        requests = [ExtractionTarget.parse(t) for t in targets]
        blob = self.context.inputs.aggregate()

        if not requests:
            self.context.output.replace(blob)
            return self

        try:
            tree = self._builder.build(blob)
        except ParseError as e:
            located = self.context.inputs.locate(e.line)
            if located is not None:
                e.context.file_path, document_line = located
                e.context.additional_info["document_line"] = document_line
            raise

        slots = self._matcher.match(tree, requests)
        OutputComposer(self.context.output, self.config.separator).compose(slots)
        self.context.last_slots = slots
        self._say(
            f"Extracted {len(slots.filled())} of {len(requests)} requested declarations"
        )
        return self

    def entities(self) -> list[TopLevelEntity]:
        """Every top-level entity in the aggregated input, in source order."""
        tree = self._builder.build(self.context.inputs.aggregate())
        return list(self._matcher.entities(tree))

    # ----------------------------------------------------------------
    # Post-processing
    # ----------------------------------------------------------------

    def wrap(self, options: WrapOptions | None = None, **kwargs: Any) -> Codesurgeon:
        """Replace the output buffer with itself wrapped in a closure."""
        if options is None:
            try:
                options = WrapOptions(**kwargs)
            except TypeError as e:
                raise ConfigurationError(
                    f"Invalid wrap options: {e}",
                    context=ErrorContext(operation="wrap", component="session"),
                    original_error=e,
                ) from e
        self.context.output.replace(wrap(self.output, options))
        return self

    def minify(self, mangle: bool = True, squeeze: bool = True) -> Codesurgeon:
        """Replace the output buffer with its minified form.

        Raises:
            MinifyError: If the output is not valid ES5.
        """
        from codesurgeon.postprocess.minifier import Minifier

        self._say("Uglify code.")
        self.context.output.replace(Minifier().run(self.output, mangle=mangle, squeeze=squeeze))
        return self

    def _validate(
        self,
        profile: ValidationProfile,
        on_success: ReportCallback | None,
        on_failure: ReportCallback | None,
        options: dict[str, bool] | None,
    ) -> Codesurgeon:
        report = Validator(self._builder).check(
            self.output,
            profile,
            options,
            on_success=on_success,
            on_failure=on_failure,
        )
        self.context.last_report = report
        if not report.valid:
            label = "Hint" if profile is ValidationProfile.PERMISSIVE else "Lint"
            self._say(f"{label} fail!")
            for diagnostic in report.diagnostics:
                self._say(
                    f"  {diagnostic.location} [{diagnostic.rule}] {diagnostic.message}"
                )
        return self

    def hint(
        self,
        on_success: ReportCallback | None = None,
        on_failure: ReportCallback | None = None,
        options: dict[str, bool] | None = None,
    ) -> Codesurgeon:
        """Validate the output with the permissive profile."""
        return self._validate(ValidationProfile.PERMISSIVE, on_success, on_failure, options)

    def lint(
        self,
        on_success: ReportCallback | None = None,
        on_failure: ReportCallback | None = None,
        options: dict[str, bool] | None = None,
    ) -> Codesurgeon:
        """Validate the output with the strict profile."""
        return self._validate(ValidationProfile.STRICT, on_success, on_failure, options)

    def probe(self, prober: DependencyProber | None = None, output: str | None = None) -> Codesurgeon:
        """Discover external modules the output loads.

        Names not yet listed in the package metadata are reported as new
        and added to it with the ``*`` specifier.
        """
        prober = prober or StaticDependencyProber(self._builder)
        report = prober.run(self.output if output is None else output)

        for name in report.local:
            self._say(f"A module was required, but not inlined to the buffer [{name}]")

        package = self.context.package
        known = package.dependencies if package is not None else {}
        report.new = reconcile(report.discovered, known)
        if package is not None:
            package.add_dependencies(report.new)

        self._say(
            f"Able to add the following modules to the package.json [{', '.join(report.new)}]"
        )
        self.context.last_probe = report
        return self

    # ----------------------------------------------------------------
    # Writing
    # ----------------------------------------------------------------

    def _prepare_write(self, path: str) -> tuple[str, str]:
        body = self.output
        package = self.context.package
        if package is not None:
            path = package.versioned_filename(path)
            body = package.banner(owner=self.config.owner) + body
        return path, "\n\n" + body

    def write(self, path: str | Path, append: bool = False) -> Codesurgeon:
        """Write the output buffer; I/O errors are logged, not raised."""
        destination, text = self._prepare_write(str(path))
        self._say(f"Write file [{destination}]")
        result = write_output(destination, text, append=append, encoding=self.config.encoding)
        if result.ok:
            self.context.new_file = destination
        return self

    def append(self, path: str | Path) -> Codesurgeon:
        return self.write(path, append=True)

    async def write_async(self, path: str | Path, append: bool = False) -> Codesurgeon:
        destination, text = self._prepare_write(str(path))
        self._say(f"Write file [{destination}]")
        result = await write_output_async(
            destination, text, append=append, encoding=self.config.encoding
        )
        if result.ok:
            self.context.new_file = destination
        return self
