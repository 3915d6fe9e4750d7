"""
Unit tests for the ramcrypt command line.
"""

from unittest.mock import patch

import pytest

from ramcrypt.frontend.cli import app
from ramcrypt.security.container import has_header
from ramcrypt.security.kdf import PROFILES, KdfParams


FAST = KdfParams(time_cost=1, memory_cost=8, parallelism=1)


# ==============================================================================
# Fixtures
# ==============================================================================

@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("RAMCRYPT_PASSWORD", "RAMCRYPT_KDF_PROFILE", "RAMCRYPT_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def fast_kdf(monkeypatch):
    """Make the default profile cheap for the duration of a test."""
    monkeypatch.setitem(PROFILES, "moderate", FAST)


@pytest.fixture
def password_env(monkeypatch):
    monkeypatch.setenv("RAMCRYPT_PASSWORD", "hunter2")


# ==============================================================================
# Tests: Hash commands
# ==============================================================================

def test_md5_command(capsys):
    assert app.main(["md5", "test"]) == app.EXIT_OK
    assert capsys.readouterr().out.strip() == "098F6BCD4621D373CADE4E832627B4F6"


def test_sha256_command(capsys):
    assert app.main(["sha256", "hello"]) == app.EXIT_OK
    assert capsys.readouterr().out.strip() == (
        "2CF24DBA5FB0A30E26E83B2AC5B9E29E1B161E5C1FA7425E73043362938B9824"
    )


def test_hash_command(tmp_path, capsys):
    present = tmp_path / "hello.txt"
    present.write_bytes(b"hello")
    missing = tmp_path / "missing.txt"

    assert app.main(["hash", str(present), str(missing)]) == app.EXIT_OK
    lines = capsys.readouterr().out.splitlines()
    assert lines[0] == f"2CF24DBA5FB0A30E26E83B2AC5B9E29E1B161E5C1FA7425E73043362938B9824  {present}"
    assert lines[1].startswith("E3B0C44298FC1C149AFBF4C8996FB92427AE41E4649B934CA495991B7852B855")


def test_hash_command_md5(tmp_path, capsys):
    path = tmp_path / "test.txt"
    path.write_bytes(b"test")
    assert app.main(["hash", "--algo", "md5", str(path)]) == app.EXIT_OK
    assert capsys.readouterr().out.startswith("098F6BCD4621D373CADE4E832627B4F6  ")


# ==============================================================================
# Tests: Encrypt / decrypt
# ==============================================================================

def test_encrypt_then_decrypt(tmp_path, fast_kdf, password_env, capsys):
    src = tmp_path / "AccountData.json"
    src.write_bytes(b'{"token": "abc"}')
    sealed = tmp_path / "AccountData.dat"
    restored = tmp_path / "restored.json"

    assert app.main(["encrypt", str(src), str(sealed)]) == app.EXIT_OK
    assert has_header(sealed.read_bytes())

    assert app.main(["decrypt", str(sealed), str(restored)]) == app.EXIT_OK
    assert restored.read_bytes() == src.read_bytes()


def test_decrypt_wrong_password(tmp_path, fast_kdf, monkeypatch, capsys):
    src = tmp_path / "data.json"
    src.write_bytes(b"secret")
    sealed = tmp_path / "data.dat"

    monkeypatch.setenv("RAMCRYPT_PASSWORD", "right")
    assert app.main(["encrypt", str(src), str(sealed)]) == app.EXIT_OK

    monkeypatch.setenv("RAMCRYPT_PASSWORD", "wrong")
    assert app.main(["decrypt", str(sealed), str(tmp_path / "out")]) == app.EXIT_FAILED
    assert "could not decrypt" in capsys.readouterr().err
    assert not (tmp_path / "out").exists()


def test_decrypt_plain_file(tmp_path, password_env, capsys):
    src = tmp_path / "plain.json"
    src.write_bytes(b"{}")
    assert app.main(["decrypt", str(src), str(tmp_path / "out")]) == app.EXIT_FAILED
    assert "is not a container" in capsys.readouterr().err


def test_encrypt_empty_file(tmp_path, fast_kdf, password_env, capsys):
    src = tmp_path / "empty.json"
    src.write_bytes(b"")
    assert app.main(["encrypt", str(src), str(tmp_path / "out")]) == app.EXIT_FAILED


def test_encrypt_prompts_for_password(tmp_path, fast_kdf):
    src = tmp_path / "data.json"
    src.write_bytes(b"secret")
    sealed = tmp_path / "data.dat"

    with patch("ramcrypt.frontend.cli.app.getpass.getpass", side_effect=["pw", "pw"]) as prompt:
        assert app.main(["encrypt", str(src), str(sealed)]) == app.EXIT_OK
    assert prompt.call_count == 2

    with patch("ramcrypt.frontend.cli.app.getpass.getpass", return_value="pw"):
        assert app.main(["decrypt", str(sealed), str(tmp_path / "out")]) == app.EXIT_OK


def test_encrypt_password_mismatch(tmp_path, capsys):
    src = tmp_path / "data.json"
    src.write_bytes(b"secret")
    with patch("ramcrypt.frontend.cli.app.getpass.getpass", side_effect=["one", "two"]):
        assert app.main(["encrypt", str(src), str(tmp_path / "out")]) == app.EXIT_USAGE
    assert "passwords do not match" in capsys.readouterr().err


def test_encrypt_empty_prompted_password(tmp_path, capsys):
    src = tmp_path / "data.json"
    src.write_bytes(b"secret")
    with patch("ramcrypt.frontend.cli.app.getpass.getpass", return_value=""):
        assert app.main(["encrypt", str(src), str(tmp_path / "out")]) == app.EXIT_USAGE


def test_closed_stdin_is_usage_error(tmp_path, capsys):
    src = tmp_path / "data.json"
    src.write_bytes(b"secret")
    with patch("ramcrypt.frontend.cli.app.getpass.getpass", side_effect=EOFError):
        assert app.main(["encrypt", str(src), str(tmp_path / "out")]) == app.EXIT_USAGE
    assert "stdin closed" in capsys.readouterr().err
    assert not (tmp_path / "out").exists()


# ==============================================================================
# Tests: Sniff and configuration
# ==============================================================================

def test_sniff_command(tmp_path, fast_kdf, password_env, capsys):
    src = tmp_path / "data.json"
    src.write_bytes(b"secret")
    sealed = tmp_path / "data.dat"
    app.main(["encrypt", str(src), str(sealed)])
    capsys.readouterr()

    assert app.main(["sniff", str(sealed)]) == app.EXIT_OK
    assert capsys.readouterr().out.startswith("container")

    assert app.main(["sniff", str(sealed), str(src)]) == app.EXIT_FAILED
    out = capsys.readouterr().out.splitlines()
    assert out[1].startswith("plain")


def test_bad_profile_env(monkeypatch, capsys):
    monkeypatch.setenv("RAMCRYPT_KDF_PROFILE", "bogus")
    assert app.main(["md5", "x"]) == app.EXIT_USAGE
    assert "unknown KDF profile" in capsys.readouterr().err


def test_missing_command_is_usage_error():
    with pytest.raises(SystemExit) as excinfo:
        app.main([])
    assert excinfo.value.code == 2
