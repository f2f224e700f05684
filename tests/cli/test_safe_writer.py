"""Unit tests for the SafeWriter class in the projsnap CLI."""

import errno
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from projsnap.cli.safe_writer import SafeWriter


@pytest.fixture
def mock_signals():
    """Replace the signal handler singleton with an uninterrupted mock."""
    with patch("projsnap.cli.safe_writer.signal_handler") as mock:
        mock.interrupted.return_value = False
        yield mock


@pytest.fixture
def mock_write():
    """Mock os.write, reporting every byte as written."""
    with patch("os.write") as mock:
        mock.side_effect = lambda fd, data: len(data)
        yield mock


@pytest.fixture
def temp_output_file(tmp_path):
    return tmp_path / "snapshot.md"


def written_bytes(mock_write):
    return b"".join(bytes(call.args[1]) for call in mock_write.call_args_list)


def test_safe_writer_init_with_fd():
    writer = SafeWriter(3)

    assert writer.file == 3
    assert writer.fd == 3
    assert writer._file_obj is None
    assert not writer._closed


@pytest.mark.parametrize("target", ["/path/to/file.md", Path("/path/to/file.md")])
def test_safe_writer_init_with_path(target):
    with patch("pathlib.Path.open") as mock_open_func:
        mock_file = MagicMock()
        mock_file.fileno.return_value = 5
        mock_open_func.return_value = mock_file

        writer = SafeWriter(target)

        assert Path(writer.file) == Path("/path/to/file.md")
        assert writer.fd == 5
        assert writer._file_obj is mock_file
        mock_open_func.assert_called_once_with("wb")


def test_safe_writer_init_with_invalid_type():
    with pytest.raises(TypeError) as excinfo:
        SafeWriter(42.0)

    assert "Expected int, str, or PathLike" in str(excinfo.value)


def test_safe_writer_init_with_missing_directory(tmp_path):
    with pytest.raises(OSError):
        SafeWriter(tmp_path / "missing" / "snapshot.md")


def test_safe_writer_write(mock_signals, mock_write):
    writer = SafeWriter(3)
    writer.write("test data")

    assert mock_write.call_count == 1
    assert mock_write.call_args.args[0] == 3
    assert written_bytes(mock_write) == b"test data"


def test_safe_writer_handles_partial_writes(mock_signals):
    with patch("os.write") as mock_write:
        mock_write.side_effect = lambda fd, data: min(len(data), 4)
        SafeWriter(3).write("0123456789")

    assert mock_write.call_count == 3
    assert [bytes(call.args[1]) for call in mock_write.call_args_list] == [b"0123456789", b"456789", b"89"]


def test_safe_writer_write_after_close():
    writer = SafeWriter(3)
    writer._closed = True

    with pytest.raises(ValueError) as excinfo:
        writer.write("test data")

    assert "Cannot write to closed SafeWriter" in str(excinfo.value)


def test_safe_writer_write_after_interruption(mock_signals, mock_write):
    mock_signals.interrupted.return_value = True

    with pytest.raises(BrokenPipeError):
        SafeWriter(3).write("test data")
    mock_write.assert_not_called()


def test_safe_writer_write_with_os_error(mock_signals):
    with patch("os.write", side_effect=OSError(errno.EIO, "Input/output error")):
        with pytest.raises(OSError) as excinfo:
            SafeWriter(3).write("test data")

    assert excinfo.value.errno == errno.EIO


def test_safe_writer_write_with_epipe(mock_signals):
    with patch("os.write", side_effect=OSError(errno.EPIPE, "Broken pipe")):
        with pytest.raises(BrokenPipeError):
            SafeWriter(3).write("test data")


def test_safe_writer_close_fd_only():
    writer = SafeWriter(3)
    writer.close()
    assert writer._closed


def test_safe_writer_close_twice():
    mock_file = MagicMock()

    writer = SafeWriter(3)
    writer._file_obj = mock_file
    writer.close()
    writer.close()

    mock_file.close.assert_called_once()
    assert writer._closed


def test_safe_writer_actual_file_write(temp_output_file):
    test_data = "# Project Snapshot: demo\n\n```\n.\n└── main.py\n```\n"

    writer = SafeWriter(temp_output_file)
    writer.write(test_data)
    writer.close()

    assert temp_output_file.read_text(encoding="utf-8") == test_data


def test_safe_writer_truncates_existing_file(temp_output_file):
    temp_output_file.write_text("old content that is longer than the new one")
    with SafeWriter(temp_output_file) as writer:
        writer.write("new")
    assert temp_output_file.read_text() == "new"


def test_safe_writer_writes_newlines_verbatim(temp_output_file):
    with SafeWriter(temp_output_file) as writer:
        writer.write("a\r\nb\n")
    assert temp_output_file.read_bytes() == b"a\r\nb\n"


def test_safe_writer_unicode_handling(temp_output_file):
    test_data = "Hello, 世界! 🌍 Café"

    with SafeWriter(temp_output_file) as writer:
        writer.write(test_data)

    assert temp_output_file.read_text(encoding="utf-8") == test_data


def test_safe_writer_context_manager_with_exception():
    try:
        with SafeWriter(3) as writer:
            assert not writer._closed
            raise ValueError("Test exception")
    except ValueError:
        pass

    assert writer._closed


def test_safe_writer_close_with_error():
    mock_file = MagicMock()
    mock_file.close.side_effect = OSError(errno.EIO, "I/O error")

    writer = SafeWriter(3)
    writer._file_obj = mock_file

    with pytest.raises(OSError) as excinfo:
        writer.close()

    assert excinfo.value.errno == errno.EIO


def test_safe_writer_close_with_broken_pipe():
    mock_file = MagicMock()
    mock_file.close.side_effect = OSError(errno.EPIPE, "Broken pipe")

    writer = SafeWriter(3)
    writer._file_obj = mock_file
    writer.close()

    assert writer._closed
