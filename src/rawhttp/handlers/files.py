"""
=============================================================================
FILE STORE AND FILE HANDLERS
=============================================================================

Serves GET /files/<name> and accepts POST /files/<name> against a single
base directory.

=============================================================================
FLOW
=============================================================================

    GET /files/report.bin
        1. Join base directory and "report.bin"
        2. Read the whole file
        3. 200 + application/octet-stream, or 404 if it does not exist

    POST /files/report.bin   (Content-Length: N)
        1. Join base directory and "report.bin"
        2. Write the N body bytes, replacing any existing file
        3. 201 Created

Any other filesystem error (permissions, a directory where a file was
expected, a full disk) is raised to the connection handler, which logs it
and drops the connection.

=============================================================================
CONCURRENT WRITES
=============================================================================

Every connection runs on its own thread, so two uploads to the same name
can overlap with each other and with downloads. With atomic_writes on
(the default) the body is written to a temp file next to the target and
moved into place with os.replace():

    write  .report.bin.k2j9.tmp   ──►   os.replace()   ──►   report.bin

A reader sees either the old file or the new one, never a half-written
file. Two racing writers still race, but the survivor is one writer's
complete body. With atomic_writes off the target is truncated and written
in place.

=============================================================================
PATH CONTAINMENT
=============================================================================

The name comes straight from the URL. A copy of the joined path is
normalized only to check containment: a name that ends up outside the base
directory ("/files/../../etc/passwd") is answered with 404 instead of
being opened. The path handed to the OS keeps its ".." segments, so
"nosuchdir/../x" fails like any lookup through a missing directory.

=============================================================================
"""

import os
import errno
import logging
import tempfile

from ..http.request import HTTPRequest
from ..http.response import HTTPResponse, octet_stream, created, not_found


logger = logging.getLogger(__name__)

# Mode for uploaded files, before the umask
FILE_MODE = 0o644


class PathOutsideBase(ValueError):
    """The requested name resolves to a path outside the base directory."""


class FileStore:
    """
    Read and write whole files by name under a base directory.

    This is the only state shared between connections. There is no
    locking; atomic_writes controls how uploads reach the disk.

    Usage:
        store = FileStore("/tmp/files")
        store.write("a.txt", b"hello")
        store.read("a.txt")   # b"hello"
        store.read("nope")    # raises FileNotFoundError
    """

    def __init__(self, base_dir: str, atomic_writes: bool = True):
        self.base_dir = os.path.abspath(base_dir)
        self.atomic_writes = atomic_writes

        # mkstemp ignores the umask, so atomic writes apply it by hand
        umask = os.umask(0)
        os.umask(umask)
        self.file_mode = FILE_MODE & ~umask

    def path_for(self, name: str) -> str:
        """
        Map a URL file name onto a filesystem path.

        Leading slashes in the name do not escape the base directory
        ("/files//x" is base/x). ".." segments are collapsed only for the
        containment check; the returned path keeps them.

        Raises:
            PathOutsideBase: if the normalized path leaves the base directory.
        """
        path = os.path.join(self.base_dir, name.lstrip("/"))
        if os.path.commonpath([self.base_dir, os.path.normpath(path)]) != self.base_dir:
            raise PathOutsideBase(f"{name!r} is outside {self.base_dir}")
        return path

    def read(self, name: str) -> bytes:
        """
        Read an entire file.

        Raises:
            FileNotFoundError: the file does not exist.
            PathOutsideBase: the name escapes the base directory.
            OSError: any other read failure.
        """
        with open(self.path_for(name), "rb") as f:
            return f.read()

    def write(self, name: str, data: bytes) -> None:
        """
        Create or replace a file with exactly `data`.

        Raises:
            PathOutsideBase: the name escapes the base directory.
            OSError: the write failed.
        """
        path = self.path_for(name)
        if os.path.isdir(path):
            raise IsADirectoryError(errno.EISDIR, "Is a directory", path)

        if not self.atomic_writes:
            fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, FILE_MODE)
            with os.fdopen(fd, "wb") as f:
                f.write(data)
            return

        directory, filename = os.path.split(path)
        fd, tmp_path = tempfile.mkstemp(
            dir=directory, prefix=f".{filename}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(data)
            os.chmod(tmp_path, self.file_mode)
            os.replace(tmp_path, path)
        except BaseException:
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
            raise


class FileHandler:
    """
    Handlers for GET and POST /files/<name>.

    Usage:
        files = FileHandler(FileStore(config.directory))
        response = files.get(request, "notes.txt")
    """

    def __init__(self, store: FileStore):
        self.store = store

    def get(self, request: HTTPRequest, name: str) -> HTTPResponse:
        """
        Serve a file's bytes.

        Returns:
            200 with the file as application/octet-stream, or 404 if the
            file does not exist (or the name leaves the base directory).
        """
        try:
            content = self.store.read(name)
        except FileNotFoundError:
            return not_found()
        except PathOutsideBase as e:
            logger.warning(f"Rejected file path: {e}")
            return not_found()

        return octet_stream(content)

    def post(self, request: HTTPRequest, name: str) -> HTTPResponse:
        """
        Store the request body under `name`.

        The body has already been read in full using Content-Length; a
        POST without Content-Length writes an empty file.

        Returns:
            201 Created, or 404 if the name leaves the base directory.
        """
        try:
            self.store.write(name, request.body)
        except PathOutsideBase as e:
            logger.warning(f"Rejected file path: {e}")
            return not_found()

        logger.debug(f"Stored {len(request.body)} bytes as {name!r}")
        return created()
