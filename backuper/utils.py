from contextlib import contextmanager
import datetime
import logging
import secrets

import chardet
import dateutil.tz

RUN_ID_ALPHABET = "1234567890abcdefghijklmnopqrstuvwxyz"
RUN_ID_LENGTH = 8

LOG = logging.getLogger(__name__)


def utcNow():
    return datetime.datetime.now(dateutil.tz.tzutc())


def localNow():
    return datetime.datetime.now(dateutil.tz.tzlocal())


def generateRunId():
    return "".join(secrets.choice(RUN_ID_ALPHABET) for _ in range(RUN_ID_LENGTH))


@contextmanager
def tryLocked(lock):
    """
    Acquire `lock` without blocking. Yields True when acquired (and releases
    it on exit), False when another holder has it.
    """
    if lock is None:
        yield True
        return
    acquired = lock.acquire(blocking=False)
    try:
        yield acquired
    finally:
        if acquired:
            lock.release()


def autoDecode(byteArray):
    detected = chardet.detect(byteArray)
    encoding = detected['encoding']
    if detected['confidence'] < 0.5:  # very arbitrary
        encoding = 'utf-8'
    return byteArray.decode(encoding)


def safeDecode(byteArray):
    try:
        return byteArray.decode('utf-8')
    except UnicodeDecodeError:
        pass
    try:
        return autoDecode(byteArray)
    except (LookupError, TypeError, ValueError):
        LOG.debug("autoDecode failed for %r", byteArray[:50], exc_info=True)
    return byteArray.decode('utf-8', errors='replace')
