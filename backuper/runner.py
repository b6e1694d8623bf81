"""
Job runner: one triggered execution of a backup job.

    Created -> WorkspaceReady -> ScriptExecuted -> ArtifactValidated -> Uploaded

Any stage failure moves the run to Failed. The failure is logged with the
run context and the runner returns: later stages are skipped, nothing is
retried and completed stages are not rolled back. The workspace is still
released (unless configured to be kept).
"""

from __future__ import annotations

import os
import threading
from typing import Callable, Mapping, Optional

from .artifact import checkArtifact
from .domain import JobDefinition, JobRun, RunState, UploadArtifact
from .errors import BackupError
from .executor import DEFAULT_SHELL, runScript
from .logging import getLogger, runLogger
from .naming import objectKey
from .template import substitute
from .utils import generateRunId, tryLocked, utcNow
from .workspace import Workspace

LOG = getLogger(__name__)


class JobRunner:
    """
    Executes a JobDefinition once per call.

    The runner object is the zero-argument callable handed to the scheduler.
    Concurrent calls are independent unless preventOverlap is set, in which
    case a call made while another run of the same job is in flight is
    skipped.
    """

    # pylint: disable-next=too-many-arguments
    def __init__(
        self,
        definition: JobDefinition,
        uploader,
        environ: Optional[Mapping[str, str]] = None,
        keepWorkspace: bool = False,
        preventOverlap: bool = False,
        shell: str = DEFAULT_SHELL,
        workspaceRoot: Optional[str] = None,
        clock: Callable = utcNow,
        newRunId: Callable[[], str] = generateRunId,
    ):
        self.definition = definition
        self._uploader = uploader
        self._environ = dict(os.environ if environ is None else environ)
        self._keepWorkspace = keepWorkspace
        self._shell = shell
        self._workspaceRoot = workspaceRoot
        self._clock = clock
        self._newRunId = newRunId
        self._runLock = threading.Lock() if preventOverlap else None
        LOG.info("creating backup command backup_name=%s schedule=%s",
                 definition.name, definition.schedule)

    def __call__(self) -> None:
        self.run()

    def run(self) -> Optional[JobRun]:
        with tryLocked(self._runLock) as acquired:
            if not acquired:
                LOG.warning("backup_name=%s: previous run still in progress, "
                            "skipping this trigger", self.definition.name)
                return None
            return self._run()

    def _run(self) -> JobRun:
        definition = self.definition
        runId = self._newRunId()
        log = runLogger(LOG, definition.name, runId)
        run = JobRun(runId=runId, definition=definition, log=log)

        log.info("backup started")
        try:
            with Workspace(definition.name, runId, keep=self._keepWorkspace,
                           root=self._workspaceRoot, log=log) as workspace:
                run.workspace = workspace.path
                run.advance(RunState.WORKSPACE_READY)
                self._execute(run)
        except BackupError as err:
            run.fail(err)
            log.error("%s failed: %s", err.stage, err)
        except Exception as err:  # pylint: disable=broad-except
            run.fail(err)
            log.exception("unexpected error: %s", err)
        log.info("backup finished state=%s", run.state.value)
        return run

    def _resolve(self, run: JobRun, text: str) -> str:
        return substitute(text, run.runId, run.name, run.workspace,
                          self._environ)

    def _execute(self, run: JobRun) -> None:
        run.script = [self._resolve(run, line) for line in run.definition.script]
        run.outputPath = self._resolve(run, run.definition.filepathToUpload)

        runScript(run.script, run.log, shell=self._shell)
        run.advance(RunState.SCRIPT_EXECUTED)

        contentType = checkArtifact(run.outputPath)
        run.advance(RunState.ARTIFACT_VALIDATED)

        run.objectKey = objectKey(self._clock(), run.name, run.runId,
                                  run.outputPath)
        artifact = UploadArtifact(
            sourcePath=run.outputPath,
            contentType=contentType,
            objectKey=run.objectKey,
            bucket=self._uploader.bucket)
        self._uploader.upload(artifact)
        run.advance(RunState.UPLOADED)
        run.log.info("backup uploaded to object storage file=%s bucket=%s "
                     "content_type=%s", artifact.objectKey, artifact.bucket,
                     artifact.contentType)
