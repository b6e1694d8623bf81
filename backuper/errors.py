"""
Errors raised by the backup pipeline.

Every error here is terminal for the run that raised it. The job runner logs
it with the run context and returns; nothing is retried or escalated.
"""


class BackupError(Exception):
    stage = "backup"


class WorkspaceCreationError(BackupError):
    stage = "workspace"


class ScriptExecutionError(BackupError):
    stage = "script"

    def __init__(self, message, returncode=None):
        super().__init__(message)
        self.returncode = returncode


class ArtifactMissingError(BackupError):
    stage = "artifact"

    def __init__(self, path):
        super().__init__("missing artifact: {!r} does not exist".format(path))
        self.path = path


class ContentTypeDetectionError(BackupError):
    stage = "content-type"


class UploadError(BackupError):
    stage = "upload"


class BucketError(Exception):
    pass
