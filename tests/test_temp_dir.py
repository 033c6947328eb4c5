import os
import re
import tempfile

import pytest

from temp_dir import ConfigurationError, allocate, temp_dir

PATTERN_ERROR = "invalid `options.pattern` value: please add pattern value"


def test_temp_dir_creates_empty_directory_in_system_temp(cleanup):
    name = temp_dir()
    cleanup.append(name)

    assert name.startswith(tempfile.gettempdir())
    assert os.path.isdir(name)
    assert os.listdir(name) == []


def test_temp_dir_with_callback(cleanup):
    received = []

    returned = temp_dir({}, lambda err, name: received.append((err, name)))

    assert returned is None
    assert len(received) == 1
    err, name = received[0]
    cleanup.append(name)
    assert err is None
    assert name.startswith(tempfile.gettempdir())
    assert os.path.isdir(name)


def test_pattern_without_wildcard_appends_token(tmp_path):
    name = temp_dir({'base_dir': str(tmp_path), 'pattern': 'test-'})

    assert re.fullmatch(r"test-[0-9a-f]{32}", os.path.basename(name))
    assert os.path.dirname(name) == str(tmp_path)


def test_pattern_wildcard_is_replaced(tmp_path):
    name = temp_dir({'base_dir': str(tmp_path), 'pattern': 'test-*-folder'})

    assert re.fullmatch(r"test-[0-9a-f]{32}-folder", os.path.basename(name))
    assert os.path.isdir(name)


def test_only_first_wildcard_is_replaced(tmp_path):
    name = allocate(str(tmp_path), 'a-*-b-*')

    assert re.fullmatch(r"a-[0-9a-f]{32}-b-\*", os.path.basename(name))


def test_repeated_pattern_calls_never_collide(tmp_path):
    names = {allocate(str(tmp_path), 'run-*') for _ in range(200)}

    assert len(names) == 200
    assert len(os.listdir(tmp_path)) == 200


def test_base_dir_option(tmp_path):
    name = temp_dir({'base_dir': str(tmp_path)})

    assert name.startswith(str(tmp_path))
    assert os.listdir(tmp_path) == [os.path.basename(name)]


def test_relative_base_dir_returns_absolute_path(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    (tmp_path / "base").mkdir()

    name = allocate("base", "x-*")

    assert os.path.isabs(name)
    assert name.startswith(str(tmp_path / "base"))


def test_default_without_pattern_raises(tmp_path):
    with pytest.raises(ConfigurationError) as excinfo:
        temp_dir({'base_dir': str(tmp_path), 'default': True})

    assert str(excinfo.value) == PATTERN_ERROR
    assert os.listdir(tmp_path) == []


def test_default_without_pattern_with_callback(tmp_path):
    received = []

    returned = temp_dir({'base_dir': str(tmp_path), 'default': True}, lambda err, name: received.append((err, name)))

    assert returned is None
    assert len(received) == 1
    err, name = received[0]
    assert isinstance(err, ConfigurationError)
    assert str(err) == PATTERN_ERROR
    assert name is None
    assert os.listdir(tmp_path) == []


def test_default_with_pattern(cleanup):
    name = temp_dir({'default': True, 'pattern': 'test-'})
    cleanup.append(name)

    assert name.startswith(tempfile.gettempdir())
    assert os.path.isdir(name)


def test_missing_base_dir_propagates_os_error(tmp_path):
    missing = str(tmp_path / "missing")

    with pytest.raises(FileNotFoundError):
        allocate(missing, 'x-*')
    with pytest.raises(FileNotFoundError):
        allocate(missing)


def test_callback_receives_filesystem_error(tmp_path):
    received = []

    temp_dir({'base_dir': str(tmp_path / "missing")}, lambda err, name: received.append((err, name)))

    assert len(received) == 1
    assert isinstance(received[0][0], FileNotFoundError)
    assert received[0][1] is None


def test_unknown_options_are_ignored(tmp_path, caplog):
    name = temp_dir({'base_dir': str(tmp_path), 'colour': 'blue'})

    assert os.path.isdir(name)
    assert "Ignoring unknown option: colour" in caplog.text


@pytest.mark.parametrize("pattern", ["/abs/x-*", "../x-*", "sub/x-*", "x-*/.."])
def test_pattern_with_path_separator_is_rejected(tmp_path, pattern):
    base = tmp_path / "base"
    base.mkdir()

    with pytest.raises(ConfigurationError, match="options.pattern"):
        allocate(str(base), pattern)

    assert os.listdir(base) == []
    assert os.listdir(tmp_path) == ["base"]
