import os
import shutil
import tempfile

from .errors import WorkspaceCreationError
from .logging import getLogger

LOG = getLogger(__name__)


def workspacePrefix(jobName, runId):
    return "backup-{}-{}-".format(jobName, runId)


class Workspace(object):
    '''
    Temporary directory for one run.

    with Workspace("db", "abcd1234") as ws:
        ...  # ws.path exists here

    The directory is removed on exit, whatever the outcome, unless keep=True.
    '''

    def __init__(self, jobName, runId, keep=False, root=None, log=LOG):
        self.jobName = jobName
        self.runId = runId
        self.keep = keep
        self.root = root
        self.path = None
        self._log = log

    def create(self):
        try:
            path = tempfile.mkdtemp(
                prefix=workspacePrefix(self.jobName, self.runId),
                dir=self.root)
        except OSError as err:
            raise WorkspaceCreationError(
                "error creating temp dir: {}".format(err)) from err
        self.path = os.path.abspath(path).rstrip(os.sep)
        self._log.debug("created workspace %s", self.path)
        return self.path

    def release(self):
        if self.path is None:
            return
        if self.keep:
            self._log.info("keeping workspace %s", self.path)
            return
        try:
            shutil.rmtree(self.path)
            self._log.debug("removed workspace %s", self.path)
        except OSError:
            self._log.warning("unable to remove workspace %s", self.path,
                              exc_info=True)

    def __enter__(self):
        self.create()
        return self

    def __exit__(self, excType, excVal, excTb):
        self.release()
        return False
