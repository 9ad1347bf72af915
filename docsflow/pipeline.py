"""
Documentation pipeline: clean, generate and optionally publish.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from rich.console import Console
from rich.markup import escape
from rich.progress import Progress, SpinnerColumn, TextColumn, TaskID

from .config import PublishSettings
from .entry_points import resolve_entry_points
from .generator import GeneratorSettings, run_generator
from .output import clean_output, finalize_output, resolve_output_dir
from .project import Preconditions
from .publisher import PublishConfig, publish_docs
from .utils import logger


class PipelineState(Enum):
    """Where a pipeline run currently is."""
    PENDING = "pending"
    CLEAN = "clean"
    GENERATE = "generate"
    PUBLISH = "publish"
    DONE = "done"
    FAILED = "failed"


@dataclass
class PipelineContext:
    """State shared by the steps of one documentation run."""
    preconditions: Preconditions
    forwarded_flags: List[str] = field(default_factory=list)
    publish: bool = False
    publish_settings: PublishSettings = field(default_factory=PublishSettings)
    settings: GeneratorSettings = field(default_factory=GeneratorSettings)
    state: PipelineState = PipelineState.PENDING
    step_outputs: Dict[str, Any] = field(default_factory=dict)
    errors: List[str] = field(default_factory=list)

    @property
    def output_path(self) -> Path:
        return resolve_output_dir(self.preconditions.root, self.settings.output_dir)


class StepReporter:
    """Live progress text for the step that is currently running."""

    def __init__(self, title: str, progress: Optional[Progress] = None,
                 task_id: Optional[TaskID] = None):
        self.title = title
        self._progress = progress
        self._task_id = task_id
        self._output = ''

    @property
    def output(self) -> str:
        return self._output

    @output.setter
    def output(self, text: str) -> None:
        self._output = text
        logger.info(f"[{self.title}] {text}")
        if self._progress is not None and self._task_id is not None:
            self._progress.update(self._task_id, description=f"{escape(self.title)}: {escape(text)}")

    def __call__(self, text: str) -> None:
        self.output = text


StepTask = Callable[[PipelineContext, StepReporter], Any]
StepCondition = Callable[[PipelineContext], bool]


class PipelineStep:
    """A single titled step of the pipeline."""

    def __init__(self, title: str, task: StepTask, state: PipelineState,
                 enabled: Optional[StepCondition] = None):
        self.title = title
        self.task = task
        self.state = state
        self.enabled = enabled

    def is_enabled(self, context: PipelineContext) -> bool:
        return self.enabled is None or bool(self.enabled(context))

    def execute(self, context: PipelineContext, reporter: StepReporter) -> Dict[str, Any]:
        """Run the step; exceptions from the task propagate unchanged."""
        if not self.is_enabled(context):
            return {
                'status': 'skipped',
                'reason': 'Condition not met',
                'output': ''
            }

        output = self.task(context, reporter)
        return {
            'status': 'success',
            'output': output
        }


class Pipeline:
    """An ordered list of steps run one after the other.

    ``preflight`` checks run before the first step. The first failing
    check or step moves the context to ``FAILED`` and its exception is
    re-raised as-is; later steps never run.
    """

    def __init__(self, name: str, steps: List[PipelineStep], console: Optional[Console] = None,
                 preflight: Optional[List[Callable[[PipelineContext], None]]] = None):
        self.name = name
        self.steps = steps
        self.console = console or Console()
        self.preflight = preflight or []

    def run(self, context: PipelineContext) -> Dict[str, Any]:
        started = datetime.now()
        results = []

        try:
            for check in self.preflight:
                check(context)
        except Exception as e:
            context.state = PipelineState.FAILED
            context.errors.append(str(e))
            raise

        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=self.console,
            transient=True
        ) as progress:
            for i, step in enumerate(self.steps):
                if not step.is_enabled(context):
                    self.console.print(f"[yellow]Skipping step {i+1}/{len(self.steps)}: {step.title}[/yellow]")
                    results.append({'step': i, 'name': step.title, 'result': step.execute(context, None)})
                    continue

                self.console.print(f"[blue]Executing step {i+1}/{len(self.steps)}: {step.title}[/blue]")
                context.state = step.state
                task_id = progress.add_task(escape(step.title), total=None)
                reporter = StepReporter(step.title, progress, task_id)

                try:
                    result = step.execute(context, reporter)
                except Exception as e:
                    context.state = PipelineState.FAILED
                    context.errors.append(str(e))
                    self.console.print(f"[red]✗ {step.title}[/red]")
                    raise
                finally:
                    progress.remove_task(task_id)

                context.step_outputs[step.title] = result
                results.append({'step': i, 'name': step.title, 'result': result})
                self.console.print(f"[green]✓ {step.title}[/green]")

        context.state = PipelineState.DONE
        elapsed = (datetime.now() - started).total_seconds()
        logger.info(f"Pipeline {self.name} completed in {elapsed:.1f}s")

        return {
            'pipeline': self.name,
            'status': context.state.value,
            'results': results
        }


def clean_step(context: PipelineContext, reporter: StepReporter) -> None:
    clean_output(context.output_path)


def generate_step(context: PipelineContext, reporter: StepReporter) -> List[str]:
    """Resolve entry points, run the generator and finalize its output."""
    entry_points = resolve_entry_points(context.preconditions)
    logger.debug(f"Entry points: {entry_points}")

    run_generator(
        entry_points,
        context.forwarded_flags,
        on_output=reporter,
        settings=context.settings,
        cwd=context.preconditions.root
    )
    finalize_output(context.output_path)
    return entry_points


def publish_step(context: PipelineContext, reporter: StepReporter) -> bool:
    config = PublishConfig.from_settings(context.publish_settings, str(context.output_path))
    reporter.output = f"pushing {context.settings.output_dir} to {config.branch}"
    return publish_docs(config, context.preconditions.root)


def publish_enabled(context: PipelineContext) -> bool:
    # Monorepo parents are not checked beyond tsconfig presence.
    return context.publish and context.preconditions.has_tsconfig


def check_output_path(context: PipelineContext) -> None:
    """Refuse to run when the output directory is not inside the project."""
    resolve_output_dir(context.preconditions.root, context.settings.output_dir)


def build_docs_pipeline(output_dir: str = "docs", console: Optional[Console] = None) -> Pipeline:
    """The clean, generate, publish pipeline."""
    return Pipeline(
        'docs',
        [
            PipelineStep(f"Clean ./{output_dir}", clean_step, PipelineState.CLEAN),
            PipelineStep("Generating documentation", generate_step, PipelineState.GENERATE),
            PipelineStep("Publish to GitHub Pages", publish_step, PipelineState.PUBLISH,
                         enabled=publish_enabled),
        ],
        console=console,
        preflight=[check_output_path]
    )
