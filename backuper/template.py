"""
Placeholder substitution for script lines and output paths.

Built-in tokens:
    ${BACKUP_ID}    the run id
    ${BACKUP_NAME}  the job name
    ${TEMP_DIR}     the run's workspace directory

Any other ${VAR} is replaced with environ[VAR] when VAR is a key of the
mapping handed in, and left untouched otherwise.
"""
import re
from typing import Mapping

BACKUP_ID = "BACKUP_ID"
BACKUP_NAME = "BACKUP_NAME"
TEMP_DIR = "TEMP_DIR"

_BUILTIN_RE = re.compile(r"\$\{(%s|%s|%s)\}" % (BACKUP_ID, BACKUP_NAME, TEMP_DIR))
_TOKEN_RE = re.compile(r"\$\{([^${}]+)\}")


def substitute(text: str, runId: str, jobName: str, tempDir: str,
               environ: Mapping[str, str]) -> str:
    builtins = {BACKUP_ID: runId, BACKUP_NAME: jobName, TEMP_DIR: tempDir}
    # re.sub never re-scans replacement text, so each pass is single and linear
    text = _BUILTIN_RE.sub(lambda match: builtins[match.group(1)], text)
    return _TOKEN_RE.sub(
        lambda match: environ.get(match.group(1), match.group(0)), text)
