import os

KEY_TIME_FMT = "%Y_%m_%d_%H_%M_%S"


def objectKey(timestamp, jobName, runId, outputPath):
    """<timestamp>-<job-name>-<run-id><ext>, e.g. 2024_05_01_03_00_00-db-k3j2h1g0.sql"""
    ext = os.path.splitext(outputPath)[1]
    return "{}-{}-{}{}".format(
        timestamp.strftime(KEY_TIME_FMT), jobName, runId, ext)
