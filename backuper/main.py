#!/usr/bin/env python
import argparse
import os
import signal
import sys
import threading
from typing import List

import backuper.logging

from .argparse import addArgumentParserBaseFlags
from .binutils import binDescriptionWithStandardFooter
from .compat import version
from .config import Config, ConfigError, loadBackupRules
from .errors import BucketError
from .runner import JobRunner
from .scheduler import CronScheduler
from .storage import Uploader, ensureBucket, newClient

_DEBUG_LOG_FILE_NAME = "backuper-debug"
LOG = backuper.logging.getLogger(__name__)

DESC = binDescriptionWithStandardFooter("""
backuper - run shell backup scripts on a cron schedule and upload the result
to object storage

Each job's script lines run as one `sh -c` script. These placeholders are
replaced in the script lines and in filepath_to_upload before running:
    ${BACKUP_ID}    random 8 character id of this run
    ${BACKUP_NAME}  the job name
    ${TEMP_DIR}     a fresh temporary directory for this run
    ${VAR}          the value of environment variable VAR, if set

The file at filepath_to_upload is uploaded as
<timestamp>-<name>-<id><ext>.
""")


def parseArgs(args=None):
    parser = argparse.ArgumentParser(
        description=DESC,
        formatter_class=argparse.RawDescriptionHelpFormatter)
    addArgumentParserBaseFlags(parser, _DEBUG_LOG_FILE_NAME)
    parser.add_argument(
        "--keep-workspace", dest="keepWorkspace", action="store_true",
        help="Do not remove each run's temporary directory")
    parser.add_argument("--version", action="store_true",
                        help="Show version and exit")
    return parser.parse_args(args)


def buildRunners(config: Config, jobs, uploader) -> List[JobRunner]:
    return [
        JobRunner(
            job,
            uploader,
            environ=os.environ,
            keepWorkspace=config.keepWorkspace,
            preventOverlap=config.preventOverlap,
            shell=config.shell)
        for job in jobs
    ]


def waitForSignal(stopEvent: threading.Event) -> None:
    def _handler(signum, _frame):
        LOG.info("received signal %d", signum)
        stopEvent.set()

    oldInt = signal.signal(signal.SIGINT, _handler)
    oldTerm = signal.signal(signal.SIGTERM, _handler)
    try:
        while not stopEvent.wait(1.0):
            pass
    finally:
        signal.signal(signal.SIGINT, oldInt)
        signal.signal(signal.SIGTERM, oldTerm)


def impl_main(args=None, stopEvent=None):
    options = parseArgs(args)
    if options.version:
        print(f"Version {version()}")
        return

    config = Config(options)
    backuper.logging.setup(debug=options.debug, verbose=options.verbose)
    LOG.debug("starting with args %s", options)
    LOG.debug("python: %s", sys.version)

    jobs = loadBackupRules(config.configPath)
    client = newClient(config.storage)
    ensureBucket(client, config.storage)
    uploader = Uploader(client, config.storage.bucket)
    runners = buildRunners(config, jobs, uploader)

    scheduler = CronScheduler()
    for runner in runners:
        scheduler.addJob(runner.definition.name, runner.definition.schedule, runner)

    scheduler.start()
    LOG.info("starting scheduler with %d job(s)", len(runners))
    try:
        waitForSignal(stopEvent or threading.Event())
    finally:
        LOG.info("stopping scheduler")
        scheduler.stop()


def main(args=None):
    try:
        impl_main(args=args)
    except (ConfigError, BucketError) as error:
        print("Error:", error, file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
