"""
MD5 helpers for OBS source files.

OBS identifies every source file by the lowercase hex MD5 of its content;
the same digest is sent in commit file lists and checked after downloads.
"""

import hashlib
from typing import Iterable, Iterator, Union

from ..exceptions import ChecksumMismatchError


def md5_hexdigest(contents: Union[bytes, str]) -> str:
    """Return the lowercase hex MD5 of ``contents`` (str is UTF-8 encoded)."""
    if isinstance(contents, str):
        contents = contents.encode("utf-8")
    return hashlib.md5(contents, usedforsecurity=False).hexdigest()


class Md5Verifier:
    """
    Incremental MD5 check for streamed content.

    Feed chunks with update() and call verify() once the stream is
    exhausted; verify() raises ChecksumMismatchError on mismatch.
    """

    def __init__(self, filename: str, expected: str) -> None:
        self.filename = filename
        self.expected = expected.lower()
        self._hash = hashlib.md5(usedforsecurity=False)
        self.size = 0

    def update(self, chunk: bytes) -> None:
        self._hash.update(chunk)
        self.size += len(chunk)

    @property
    def hexdigest(self) -> str:
        return self._hash.hexdigest()

    def verify(self) -> None:
        actual = self.hexdigest
        if actual != self.expected:
            raise ChecksumMismatchError(self.filename, self.expected, actual)


def verified_stream(chunks: Iterable[bytes], filename: str, expected: str) -> Iterator[bytes]:
    """
    Pass ``chunks`` through, checking their MD5 once the input is exhausted.

    The last chunk is only handed out after verification, so a consumer never
    sees the end of a corrupted stream without an exception.
    """
    verifier = Md5Verifier(filename, expected)
    pending = None
    for chunk in chunks:
        verifier.update(chunk)
        if pending is not None:
            yield pending
        pending = chunk
    verifier.verify()
    if pending is not None:
        yield pending


__all__ = ["md5_hexdigest", "Md5Verifier", "verified_stream"]
