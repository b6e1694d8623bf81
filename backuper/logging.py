import logging
import os
import sys

FMT = (
    '+%(process)-6d %(levelname)-9s '
    '%(name)-20s %(filename)20s:%(lineno)-5d '
    '[%(asctime)s] %(message)s')


def getLogger(name):
    return logging.getLogger(name)


def setup(debug=False, verbose=None):
    '''
    Configure the root logger.

    debug=True (or -v) logs DEBUG to stderr, debug=<path> logs DEBUG to that
    file, otherwise INFO goes to stderr.
    '''
    if isinstance(debug, str):
        logging.basicConfig(
            filename=os.path.expanduser(debug),
            level=logging.DEBUG,
            format=FMT)
    elif debug or verbose:
        logging.basicConfig(stream=sys.stderr, level=logging.DEBUG, format=FMT)
    else:
        logging.basicConfig(stream=sys.stderr, level=logging.INFO, format=FMT)


class RunLogAdapter(logging.LoggerAdapter):
    """Tags every record with the job name and run id of one backup run."""

    def process(self, msg, kwargs):
        extra = dict(self.extra)
        extra.update(kwargs.get('extra') or {})
        kwargs['extra'] = extra
        prefix = '[backup_name={} id={}] '.format(
            self.extra['backupName'], self.extra['runId'])
        return prefix + str(msg), kwargs


def runLogger(logger, jobName, runId):
    return RunLogAdapter(logger, {'backupName': jobName, 'runId': runId})
