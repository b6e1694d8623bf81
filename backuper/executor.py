"""
Run a job's script lines as a single shell script.

Script content is trusted configuration: it is handed to the shell as-is,
so the lines share one shell environment and can use any shell feature.
"""
import logging
from subprocess import DEVNULL, PIPE, Popen
import threading
from typing import Sequence

from .errors import ScriptExecutionError
from .utils import safeDecode

DEFAULT_SHELL = "sh"
SCRIPT_PREFIX = "SCRIPT> "


def formatLine(raw: bytes) -> str:
    line = safeDecode(raw).rstrip("\r\n")
    return line.replace("\n", "\\n")


class OutputLineLogger(object):
    """Line-oriented sink writing one subprocess stream to a run logger."""

    def __init__(self, log, isErr):
        self._log = log
        self.stream = "stderr" if isErr else "stdout"
        self.level = logging.ERROR if isErr else logging.INFO

    def write(self, raw: bytes) -> None:
        self._log.log(self.level, "%s%s", SCRIPT_PREFIX, formatLine(raw),
                      extra={"stream": self.stream})

    def pump(self, pipe) -> None:
        with pipe:
            for raw in iter(pipe.readline, b""):
                self.write(raw)


def joinScript(lines: Sequence[str]) -> str:
    return "\n".join(lines)


def runScript(lines: Sequence[str], log, shell: str = DEFAULT_SHELL) -> None:
    script = joinScript(lines)
    log.debug("execute: %r", script)
    stdoutLog = OutputLineLogger(log, isErr=False)
    stderrLog = OutputLineLogger(log, isErr=True)
    try:
        proc = Popen([shell, "-c", script], stdin=DEVNULL, stdout=PIPE,
                     stderr=PIPE)
    except (OSError, ValueError) as err:
        raise ScriptExecutionError(
            "error running backup script: {}".format(err)) from err

    with proc:
        errPump = threading.Thread(
            target=stderrLog.pump, args=(proc.stderr,), daemon=True)
        errPump.start()
        stdoutLog.pump(proc.stdout)
        errPump.join()
        rc = proc.wait()

    log.debug("script exited rc=%d", rc)
    if rc != 0:
        raise ScriptExecutionError(
            "error running backup script: exit status {}".format(rc),
            returncode=rc)
