import os
import shutil
import tempfile
import unittest
from unittest import mock

from backuper.errors import WorkspaceCreationError
from backuper.workspace import Workspace


class TestWorkspace(unittest.TestCase):
    def setUp(self):
        self.root = tempfile.mkdtemp()

    def tearDown(self):
        shutil.rmtree(self.root, ignore_errors=True)

    def testCreatesNamedDirectory(self):
        with Workspace('db', 'abcd1234', root=self.root) as ws:
            self.assertTrue(os.path.isdir(ws.path))
            self.assertTrue(os.path.isabs(ws.path))
            self.assertFalse(ws.path.endswith(os.sep))
            self.assertTrue(
                os.path.basename(ws.path).startswith('backup-db-abcd1234-'))

    def testRemovedOnExit(self):
        with Workspace('db', 'abcd1234', root=self.root) as ws:
            with open(os.path.join(ws.path, 'out.txt'), 'w') as fp:
                fp.write('hi')
        self.assertFalse(os.path.exists(ws.path))

    def testRemovedOnError(self):
        with self.assertRaises(RuntimeError):
            with Workspace('db', 'abcd1234', root=self.root) as ws:
                raise RuntimeError('boom')
        self.assertFalse(os.path.exists(ws.path))

    def testKeep(self):
        with Workspace('db', 'abcd1234', keep=True, root=self.root) as ws:
            pass
        self.assertTrue(os.path.isdir(ws.path))

    def testDistinctPerRun(self):
        with Workspace('db', 'abcd1234', root=self.root) as ws1:
            with Workspace('db', 'abcd1234', root=self.root) as ws2:
                self.assertNotEqual(ws1.path, ws2.path)

    def testCreationFailure(self):
        missingRoot = os.path.join(self.root, 'does', 'not', 'exist')
        with self.assertRaises(WorkspaceCreationError):
            with Workspace('db', 'abcd1234', root=missingRoot):
                self.fail('body must not run')

    @mock.patch('backuper.workspace.shutil.rmtree', side_effect=OSError('busy'))
    def testRemovalFailureIsOnlyLogged(self, _rmtree):
        log = mock.MagicMock()
        with Workspace('db', 'abcd1234', root=self.root, log=log):
            pass
        log.warning.assert_called_once()
