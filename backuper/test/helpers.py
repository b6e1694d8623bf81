from contextlib import contextmanager
from io import StringIO
import logging
import sys
import threading

from backuper.domain import JobDefinition

BUCKET = 'backups'


def jobDef(name='db', script=('echo hi > ${TEMP_DIR}/out.txt',),
           output='${TEMP_DIR}/out.txt', schedule='0 3 * * *'):
    return JobDefinition(name=name, schedule=schedule, script=tuple(script),
                         filepathToUpload=output)


class FakeUploader(object):
    '''Uploader spy: records each artifact and the file content at upload time.'''

    def __init__(self, bucket=BUCKET, error=None, gate=None):
        self.bucket = bucket
        self.error = error
        self.gate = gate
        self.entered = threading.Event()
        self.calls = []
        self.contents = []
        self._lock = threading.Lock()

    def upload(self, artifact):
        self.entered.set()
        if self.gate is not None:
            assert self.gate.wait(10)
        with open(artifact.sourcePath, 'rb') as fp:
            content = fp.read()
        with self._lock:
            self.calls.append(artifact)
            self.contents.append(content)
        if self.error is not None:
            raise self.error


class RecordingHandler(logging.Handler):
    def __init__(self):
        super().__init__(level=logging.DEBUG)
        self.records = []

    def emit(self, record):
        self.records.append(record)

    def messages(self):
        return [rec.getMessage() for rec in self.records]


@contextmanager
def recordedLogs(name='backuper'):
    handler = RecordingHandler()
    logger = logging.getLogger(name)
    oldLevel = logger.level
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG)
    try:
        yield handler
    finally:
        logger.removeHandler(handler)
        logger.setLevel(oldLevel)


@contextmanager
def capturedOutput():
    ''' Used to capture stdout or stderr.
    eg.
    with capturedOutput() as (out, err):
        print("foo")

    self.assertEqual(out.getvalue(), "foo")
    '''
    newOut, newErr = StringIO(), StringIO()
    oldOut, oldErr = sys.stdout, sys.stderr
    try:
        sys.stdout, sys.stderr = newOut, newErr
        yield sys.stdout, sys.stderr
    finally:
        sys.stdout, sys.stderr = oldOut, oldErr
