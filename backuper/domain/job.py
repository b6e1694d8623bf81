"""
Domain model for backup jobs and their runs.

A JobDefinition is loaded once from the jobs file and shared read-only by
every run it triggers. A JobRun lives for exactly one trigger and is owned by
the thread executing it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
import logging
from typing import Any, List, Optional, Tuple


class RunState(Enum):
    """Run lifecycle states, in pipeline order."""

    CREATED = "created"
    WORKSPACE_READY = "workspace-ready"
    SCRIPT_EXECUTED = "script-executed"
    ARTIFACT_VALIDATED = "artifact-validated"
    UPLOADED = "uploaded"
    FAILED = "failed"


_NEXT_STATE = {
    RunState.CREATED: RunState.WORKSPACE_READY,
    RunState.WORKSPACE_READY: RunState.SCRIPT_EXECUTED,
    RunState.SCRIPT_EXECUTED: RunState.ARTIFACT_VALIDATED,
    RunState.ARTIFACT_VALIDATED: RunState.UPLOADED,
}


@dataclass(frozen=True)
class JobDefinition:
    name: str
    schedule: str
    script: Tuple[str, ...]
    filepathToUpload: str


@dataclass
class JobRun:  # pylint: disable=too-many-instance-attributes
    runId: str
    definition: JobDefinition
    log: Any = field(default=None, repr=False)
    workspace: Optional[str] = None
    script: List[str] = field(default_factory=list)
    outputPath: Optional[str] = None
    objectKey: Optional[str] = None
    state: RunState = RunState.CREATED
    error: Optional[Exception] = None

    def __post_init__(self):
        if self.log is None:
            self.log = logging.getLogger(__name__)

    @property
    def name(self) -> str:
        return self.definition.name

    @property
    def succeeded(self) -> bool:
        return self.state == RunState.UPLOADED

    def advance(self, state: RunState) -> None:
        """Move to the next pipeline state; out-of-order moves are bugs."""
        assert _NEXT_STATE.get(self.state) == state, (self.state, state)
        self.state = state

    def fail(self, error: Exception) -> None:
        assert self.state not in (RunState.UPLOADED, RunState.FAILED), self.state
        self.error = error
        self.state = RunState.FAILED


@dataclass(frozen=True)
class UploadArtifact:
    sourcePath: str
    contentType: str
    objectKey: str
    bucket: str
