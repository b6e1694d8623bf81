import os

import magic

from .errors import ArtifactMissingError, ContentTypeDetectionError


def validateArtifact(path):
    # existence only: size, checksum and age are not inspected
    if not os.path.exists(path):
        raise ArtifactMissingError(path)


def detectContentType(path):
    """MIME type of `path`, determined from its content by libmagic."""
    try:
        contentType = magic.from_file(path, mime=True)
    except (magic.MagicException, OSError) as err:
        raise ContentTypeDetectionError(
            "error detecting mimetype of {!r}: {}".format(path, err)) from err
    if not contentType:
        raise ContentTypeDetectionError(
            "error detecting mimetype of {!r}: no result".format(path))
    return contentType


def checkArtifact(path):
    validateArtifact(path)
    return detectContentType(path)
