import json
import subprocess
import sys
from unittest import mock

import pytest

from agentsesame.update import (
    CURRENT_VERSION,
    UpdateError,
    current_exe_path,
    curl_download,
    detect_target,
    fetch_latest_version,
    parse_checksum_output,
    self_update,
    verify_checksum,
)

HASH_A = "a" * 64
HASH_B = "b" * 64


def _completed(returncode=0, stdout=b""):
    return subprocess.CompletedProcess(args=[], returncode=returncode, stdout=stdout, stderr=b"")


@pytest.mark.parametrize(
    "system, machine, expected",
    [
        ("Linux", "x86_64", "x86_64-unknown-linux-musl"),
        ("Linux", "aarch64", "aarch64-unknown-linux-gnu"),
        ("Darwin", "x86_64", "x86_64-apple-darwin"),
        ("Darwin", "arm64", "aarch64-apple-darwin"),
        ("Windows", "AMD64", "x86_64-pc-windows-msvc"),
    ],
)
def test_detect_target(system, machine, expected):
    with mock.patch("platform.system", return_value=system), mock.patch(
        "platform.machine", return_value=machine
    ):
        assert detect_target() == expected


def test_detect_target_unsupported():
    with mock.patch("platform.system", return_value="FreeBSD"), mock.patch(
        "platform.machine", return_value="riscv64"
    ):
        with pytest.raises(UpdateError, match="No pre-built binary for freebsd-riscv64"):
            detect_target()


def test_parse_checksum_output_sha256sum_format():
    assert parse_checksum_output(f"{HASH_A}  ase.tar.gz\n") == HASH_A


def test_parse_checksum_output_certutil_format():
    output = (
        "SHA256 hash of ase.zip:\r\n"
        f"{HASH_B.upper()}\r\n"
        "CertUtil: -hashfile command completed successfully.\r\n"
    )
    assert parse_checksum_output(output) == HASH_B


def test_parse_checksum_output_without_hash():
    assert parse_checksum_output("nothing useful here\nabc  file\n") == ""


def test_fetch_latest_version_reads_tag():
    body = json.dumps({"tag_name": "v9.9.9", "name": "release"}).encode()
    with mock.patch("subprocess.run", return_value=_completed(stdout=body)) as run:
        assert fetch_latest_version() == "v9.9.9"
    assert run.call_args.args[0][0] == "curl"


def test_fetch_latest_version_missing_tag():
    with mock.patch("subprocess.run", return_value=_completed(stdout=b"{}")):
        with pytest.raises(UpdateError, match="No tag_name"):
            fetch_latest_version()


def test_fetch_latest_version_bad_json():
    with mock.patch("subprocess.run", return_value=_completed(stdout=b"not json")):
        with pytest.raises(UpdateError, match="Failed to parse"):
            fetch_latest_version()


def test_fetch_latest_version_curl_failure():
    with mock.patch("subprocess.run", return_value=_completed(returncode=22)):
        with pytest.raises(UpdateError, match="Failed to fetch release info"):
            fetch_latest_version()


def test_fetch_latest_version_without_curl():
    with mock.patch("subprocess.run", side_effect=FileNotFoundError("curl")):
        with pytest.raises(UpdateError, match="Is curl installed"):
            fetch_latest_version()


def test_curl_download_passes_destination(tmp_path):
    dest = tmp_path / "out.tar.gz"
    with mock.patch("subprocess.run", return_value=_completed()) as run:
        curl_download("https://example.com/a.tar.gz", dest)
    assert run.call_args.args[0] == [
        "curl",
        "-fSL",
        "-o",
        str(dest),
        "https://example.com/a.tar.gz",
    ]


def test_curl_download_failure(tmp_path):
    with mock.patch("subprocess.run", return_value=_completed(returncode=22)):
        with pytest.raises(UpdateError, match="curl download failed"):
            curl_download("https://example.com/missing", tmp_path / "x")


def _write_sha(tmp_path, content):
    (tmp_path / "ase.tar.gz").write_bytes(b"archive")
    (tmp_path / "ase.tar.gz.sha256").write_text(content)


def test_verify_checksum_match(tmp_path):
    _write_sha(tmp_path, f"{HASH_A.upper()}  ase.tar.gz\n")
    stdout = f"{HASH_A}  ase.tar.gz\n".encode()
    with mock.patch("shutil.which", return_value="/usr/bin/tool"), mock.patch(
        "subprocess.run", return_value=_completed(stdout=stdout)
    ) as run:
        assert verify_checksum(tmp_path, "ase.tar.gz") is None
    assert run.call_args.kwargs["cwd"] == tmp_path


def test_verify_checksum_mismatch(tmp_path):
    _write_sha(tmp_path, f"{HASH_A}  ase.tar.gz\n")
    stdout = f"{HASH_B}  ase.tar.gz\n".encode()
    with mock.patch("shutil.which", return_value="/usr/bin/tool"), mock.patch(
        "subprocess.run", return_value=_completed(stdout=stdout)
    ):
        with pytest.raises(UpdateError, match="Checksum mismatch"):
            verify_checksum(tmp_path, "ase.tar.gz")


def test_verify_checksum_empty_file(tmp_path):
    _write_sha(tmp_path, "   \n")
    with pytest.raises(UpdateError, match="Empty checksum file"):
        verify_checksum(tmp_path, "ase.tar.gz")


def test_verify_checksum_missing_file(tmp_path):
    with pytest.raises(UpdateError, match="Failed to read checksum file"):
        verify_checksum(tmp_path, "ase.tar.gz")


def test_verify_checksum_without_tools(tmp_path):
    _write_sha(tmp_path, f"{HASH_A}  ase.tar.gz\n")
    with mock.patch("shutil.which", return_value=None):
        with pytest.raises(UpdateError, match="No checksum tool available"):
            verify_checksum(tmp_path, "ase.tar.gz")


def test_verify_checksum_tool_failure(tmp_path):
    _write_sha(tmp_path, f"{HASH_A}  ase.tar.gz\n")
    with mock.patch("shutil.which", return_value="/usr/bin/tool"), mock.patch(
        "subprocess.run", return_value=_completed(returncode=1)
    ):
        with pytest.raises(UpdateError, match="Checksum tool failed"):
            verify_checksum(tmp_path, "ase.tar.gz")


def test_current_exe_path_resolves_argv0(tmp_path):
    exe = tmp_path / "ase"
    exe.write_text("")
    with mock.patch.object(sys, "argv", [str(exe)]):
        assert current_exe_path() == exe.resolve()


def test_current_exe_path_unknown(tmp_path):
    missing = str(tmp_path / "no-such-program")
    with mock.patch.object(sys, "argv", [missing]), mock.patch(
        "shutil.which", return_value=None
    ):
        with pytest.raises(UpdateError, match="current binary path"):
            current_exe_path()


def test_self_update_when_already_current(capsys):
    body = json.dumps({"tag_name": f"v{CURRENT_VERSION}"}).encode()
    with mock.patch("subprocess.run", return_value=_completed(stdout=body)) as run:
        self_update()
    assert run.call_count == 1
    assert f"Already up to date (v{CURRENT_VERSION})." in capsys.readouterr().err


def test_self_update_download_failure():
    body = json.dumps({"tag_name": "v99.0.0"}).encode()
    responses = [_completed(stdout=body), _completed(returncode=22)]
    with mock.patch("subprocess.run", side_effect=responses), mock.patch(
        "platform.system", return_value="Linux"
    ), mock.patch("platform.machine", return_value="x86_64"):
        with pytest.raises(UpdateError, match="Failed to download release"):
            self_update()