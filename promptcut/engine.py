"""Orchestrator — turns a validated action plan into media operations."""

import logging
from typing import Callable, Protocol

from promptcut import ffutil
from promptcut.artifacts import ArtifactStore
from promptcut.editors.cut import trim_range
from promptcut.editors.mute import strip_audio
from promptcut.errors import UnrecognizedActionError
from promptcut.models import (
    ActionPlan,
    Artifact,
    CutAction,
    ExecutionResult,
    MediaAsset,
    MuteAction,
    SplitAction,
    UnmuteAction,
)
from promptcut.plan import validate

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[str, float], None]


class InstructionSource(Protocol):
    async def interpret(self, prompt: str) -> str: ...


def _fmt(seconds: float) -> str:
    # Exact bounds: whole seconds without ".0", anything else as repr.
    if float(seconds).is_integer():
        return str(int(seconds))
    return repr(float(seconds))


async def _cut(plan: CutAction, asset: MediaAsset, store: ArtifactStore, progress) -> ExecutionResult:
    progress(f"Cutting {_fmt(plan.start)}s-{_fmt(plan.end)}s", 0.0)
    output = await trim_range(asset, plan.start, plan.end, store.allocate("cut"))
    return ExecutionResult(
        success=True,
        status_text=f"Video cut from {_fmt(plan.start)} seconds to {_fmt(plan.end)} seconds.",
        artifacts=[store.register(output)],
    )


async def _split(plan: SplitAction, asset: MediaAsset, store: ArtifactStore, progress) -> ExecutionResult:
    n = len(plan.ranges)
    artifacts: list[Artifact] = []
    lines: list[str] = []

    try:
        # Parts run one at a time: a failing part must stop the rest.
        for i, r in enumerate(plan.ranges, 1):
            progress(f"Cutting part {i} of {n}", (i - 1) / n)
            output = await trim_range(asset, r.start, r.end, store.allocate(f"split_{i}"))
            artifacts.append(store.register(output))
            lines.append(f"Video part {i} cut from {_fmt(r.start)} to {_fmt(r.end)} seconds.")
    except BaseException:
        # Includes CancelledError, so a cancelled split leaves nothing behind.
        logger.warning(
            "Split of %s failed at part %d of %d; discarding %d finished part(s)",
            asset.name, len(artifacts) + 1, n, len(artifacts),
        )
        store.discard(artifacts)
        raise

    lines.append("All video parts cut successfully!")
    return ExecutionResult(success=True, status_text="\n".join(lines), artifacts=artifacts)


async def _mute(asset: MediaAsset, store: ArtifactStore, progress) -> ExecutionResult:
    progress("Removing audio track", 0.0)
    output = await strip_audio(asset, store.allocate("muted"))
    return ExecutionResult(
        success=True,
        status_text="Video audio has been muted.",
        artifacts=[store.register(output)],
    )


async def execute(
    plan: ActionPlan,
    asset: MediaAsset,
    store: ArtifactStore,
    on_progress: ProgressCallback | None = None,
) -> ExecutionResult:
    """Run ``plan`` against ``asset``.

    Either every artifact of the plan is produced and returned, or an
    exception propagates and nothing is left behind.

    Args:
        plan: A plan returned by :func:`promptcut.plan.validate`.
        asset: The uploaded input; read only.
        store: Where outputs are allocated and registered.
        on_progress: Optional callback(stage_name, fraction_complete).
    """

    def _progress(stage: str, frac: float) -> None:
        if on_progress:
            on_progress(stage, frac)

    if isinstance(plan, UnmuteAction):
        # Nothing tracks a muted state, so there is nothing to undo.
        _progress("Done", 1.0)
        return ExecutionResult(
            success=True,
            status_text=(
                "Video audio has been unmuted. The original audio is kept; "
                "no new file was produced."
            ),
        )

    if not isinstance(plan, (CutAction, SplitAction, MuteAction)):
        raise UnrecognizedActionError(f"Unrecognized action: {plan!r}")

    ffutil.check_ffmpeg()
    logger.info("Running %s on %s", plan.action, asset.name)

    if isinstance(plan, CutAction):
        result = await _cut(plan, asset, store, _progress)
    elif isinstance(plan, SplitAction):
        result = await _split(plan, asset, store, _progress)
    else:
        result = await _mute(asset, store, _progress)

    _progress("Done", 1.0)
    return result


async def process_instruction(
    prompt: str,
    asset: MediaAsset,
    client: InstructionSource,
    store: ArtifactStore,
    on_progress: ProgressCallback | None = None,
) -> ExecutionResult:
    """Ask the instruction service for a plan, validate it and execute it."""
    raw = await client.interpret(prompt)
    plan = validate(raw)
    return await execute(plan, asset, store, on_progress=on_progress)
