"""Tests for upload intake."""

import asyncio
import io

import pytest
from fastapi import UploadFile

from app.review.errors import SubmissionError
from app.review.intake import (
    MAX_UPLOAD_SIZE_BYTES,
    SourceSubmission,
    read_upload,
    validate_filename,
    validate_submission,
)


def _upload(data: bytes, filename="main.rs") -> UploadFile:
    return UploadFile(io.BytesIO(data), filename=filename)


def test_read_upload():
    upload = _upload(b"fn main() {}")

    submission = asyncio.run(read_upload(upload))

    assert submission == SourceSubmission("main.rs", b"fn main() {}")
    assert submission.size == 12
    assert upload.file.closed


def test_upload_is_closed_on_rejection():
    upload = _upload(b"x", filename="notes.txt")

    with pytest.raises(SubmissionError, match="Invalid file type"):
        asyncio.run(read_upload(upload))
    assert upload.file.closed


def test_size_limit_is_inclusive():
    data = b"a" * MAX_UPLOAD_SIZE_BYTES
    assert asyncio.run(read_upload(_upload(data, "big.py"))).size == MAX_UPLOAD_SIZE_BYTES

    upload = _upload(data + b"a", "big.py")
    with pytest.raises(SubmissionError, match="File too large"):
        asyncio.run(read_upload(upload))
    assert upload.file.closed


def test_custom_limit():
    with pytest.raises(SubmissionError):
        asyncio.run(read_upload(_upload(b"12345", "a.c"), max_bytes=4))


def test_missing_upload():
    with pytest.raises(SubmissionError, match="No file uploaded"):
        asyncio.run(read_upload(None))


@pytest.mark.parametrize("filename", ["", None])
def test_missing_filename(filename):
    with pytest.raises(SubmissionError, match="No file uploaded"):
        validate_filename(filename)


@pytest.mark.parametrize("filename", ["APP.JS", "Main.Java", "x.TSX", "lib.Rs"])
def test_extension_check_is_case_insensitive(filename):
    assert validate_filename(filename) == filename


@pytest.mark.parametrize("filename", ["notes.txt", "Makefile", "script.py.bak", "a.rb"])
def test_disallowed_extension(filename):
    with pytest.raises(SubmissionError, match="Invalid file type"):
        validate_filename(filename)


def test_validate_submission_checks_size():
    with pytest.raises(SubmissionError):
        validate_submission(SourceSubmission("a.py", b"abc"), max_bytes=2)
    validate_submission(SourceSubmission("a.py", b"ab"), max_bytes=2)


def test_text_decoding_replaces_invalid_bytes():
    submission = SourceSubmission("a.py", b"print('ok')\xff")
    assert submission.text() == "print('ok')�"
