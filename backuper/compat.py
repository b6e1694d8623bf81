from importlib import metadata

DIST_NAME = "simple-backuper"


def version() -> str:
    try:
        return metadata.version(DIST_NAME)
    except metadata.PackageNotFoundError:
        return "unknown"
