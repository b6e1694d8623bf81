"""
Domain models for backuper.

This package contains plain data with no I/O.
"""

from .job import JobDefinition, JobRun, RunState, UploadArtifact

__all__ = ["JobDefinition", "JobRun", "RunState", "UploadArtifact"]
