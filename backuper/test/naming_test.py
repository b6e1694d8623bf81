import datetime

import dateutil.tz
import pytest

from backuper.naming import objectKey

WHEN = datetime.datetime(2024, 5, 1, 3, 4, 5, 999, tzinfo=dateutil.tz.tzutc())


@pytest.mark.parametrize('path, ext', [
    ('/tmp/x/db.sql', '.sql'),
    ('/tmp/x/db.tar.gz', '.gz'),
    ('/tmp/x/out.TXT', '.TXT'),
    ('/tmp/x/noext', ''),
])
def testExtensionPreserved(path, ext):
    key = objectKey(WHEN, 'db', 'abcd1234', path)
    assert key == '2024_05_01_03_04_05-db-abcd1234' + ext


def testPure():
    assert (objectKey(WHEN, 'db', 'abcd1234', 'a.sql')
            == objectKey(WHEN, 'db', 'abcd1234', 'a.sql'))


def testKeysSortByTime():
    later = WHEN + datetime.timedelta(days=40, seconds=1)
    assert objectKey(WHEN, 'db', 'zzzzzzzz', 'a') < objectKey(later, 'db', '00000000', 'a')
