"""Self-update: download the newest release and replace the running executable."""

from __future__ import annotations

import json
import os
import platform
import shutil
import subprocess
import sys
import tempfile
from pathlib import Path

REPO = os.environ.get("ASE_UPDATE_REPO", "agents-sesame/agents-sesame")
CURRENT_VERSION = "0.1.2"
IS_WINDOWS = sys.platform.startswith("win")
BINARY = "ase.exe" if IS_WINDOWS else "ase"

_TARGETS = {
    ("linux", "x86_64"): "x86_64-unknown-linux-musl",
    ("linux", "aarch64"): "aarch64-unknown-linux-gnu",
    ("macos", "x86_64"): "x86_64-apple-darwin",
    ("macos", "aarch64"): "aarch64-apple-darwin",
    ("windows", "x86_64"): "x86_64-pc-windows-msvc",
}
_OS_NAMES = {"linux": "linux", "darwin": "macos", "windows": "windows"}
_ARCH_NAMES = {"x86_64": "x86_64", "amd64": "x86_64", "aarch64": "aarch64", "arm64": "aarch64"}


class UpdateError(Exception):
    """Raised when any step of the update fails."""


def _log(message: str) -> None:
    print(message, file=sys.stderr)


def self_update() -> None:
    """Replace the installed executable with the latest release, if newer."""
    _log("Checking for updates...")
    latest = fetch_latest_version()
    if latest.lstrip("v") == CURRENT_VERSION:
        _log(f"Already up to date (v{CURRENT_VERSION}).")
        return

    _log(f"Update available: v{CURRENT_VERSION} -> {latest}")
    _log("Downloading...")

    target = detect_target()
    release_name = f"ase-{latest}-{target}"
    archive_name = f"{release_name}.zip" if IS_WINDOWS else f"{release_name}.tar.gz"
    url = f"https://github.com/{REPO}/releases/download/{latest}/{archive_name}"

    tmpdir = Path(tempfile.mkdtemp(prefix="ase-update-"))
    try:
        archive_path = tmpdir / archive_name
        try:
            curl_download(url, archive_path)
        except UpdateError as exc:
            raise UpdateError(
                "Failed to download release. Check your internet connection."
            ) from exc

        try:
            curl_download(f"{url}.sha256", tmpdir / f"{archive_name}.sha256")
        except UpdateError:
            pass
        else:
            verify_checksum(tmpdir, archive_name)

        _extract(archive_path, tmpdir)

        current_bin = current_exe_path()
        new_bin = tmpdir / release_name / BINARY
        if not new_bin.exists():
            raise UpdateError(f"Binary not found in release archive at {new_bin}")
        _install(new_bin, current_bin)
    finally:
        shutil.rmtree(tmpdir, ignore_errors=True)

    _log(f"Updated to {latest} successfully!")


def _extract(archive_path: Path, dest: Path) -> None:
    flags = "-xf" if IS_WINDOWS else "-xzf"
    try:
        result = subprocess.run(["tar", flags, str(archive_path), "-C", str(dest)], check=False)
    except OSError as exc:
        raise UpdateError("Failed to extract archive") from exc
    if result.returncode != 0:
        raise UpdateError("Archive extraction failed")


def _install(new_bin: Path, current_bin: Path) -> None:
    backup = current_bin.with_suffix(".bak")
    try:
        current_bin.rename(backup)
    except OSError as exc:
        raise UpdateError("Failed to back up current binary. Check file permissions.") from exc

    try:
        shutil.copyfile(new_bin, current_bin)
    except OSError as exc:
        try:
            backup.rename(current_bin)
        except OSError:
            pass
        raise UpdateError(f"Failed to install new binary: {exc}") from exc

    if not IS_WINDOWS:
        try:
            current_bin.chmod(0o755)
        except OSError:
            pass
    try:
        backup.unlink()
    except OSError:
        pass


def fetch_latest_version() -> str:
    """Tag name of the latest published release."""
    url = f"https://api.github.com/repos/{REPO}/releases/latest"
    try:
        result = subprocess.run(["curl", "-fsSL", url], capture_output=True, check=False)
    except OSError as exc:
        raise UpdateError("Failed to run curl. Is curl installed?") from exc
    if result.returncode != 0:
        raise UpdateError("Failed to fetch release info from GitHub")

    try:
        info = json.loads(result.stdout)
    except ValueError as exc:
        raise UpdateError("Failed to parse GitHub API response") from exc

    tag = info.get("tag_name") if isinstance(info, dict) else None
    if not isinstance(tag, str):
        raise UpdateError("No tag_name in GitHub API response")
    return tag


def detect_target() -> str:
    """Release target triple for this platform."""
    os_name = platform.system().lower()
    arch = platform.machine().lower()
    key = (_OS_NAMES.get(os_name, os_name), _ARCH_NAMES.get(arch, arch))
    try:
        return _TARGETS[key]
    except KeyError:
        raise UpdateError(
            f"No pre-built binary for {key[0]}-{key[1]}. "
            f"Build from source: cargo install --git https://github.com/{REPO}"
        ) from None


def current_exe_path() -> Path:
    """Resolved path of the executable that started this process."""
    argv0 = sys.argv[0] if sys.argv else ""
    if not argv0:
        raise UpdateError("Failed to determine current binary path")
    candidate = Path(argv0)
    if not candidate.exists():
        found = shutil.which(argv0)
        if found is None:
            raise UpdateError("Failed to determine current binary path")
        candidate = Path(found)
    try:
        return candidate.resolve(strict=True)
    except OSError as exc:
        raise UpdateError("Failed to resolve binary path") from exc


def curl_download(url: str, dest: Path) -> None:
    """Download ``url`` to ``dest`` with curl."""
    try:
        result = subprocess.run(["curl", "-fSL", "-o", str(dest), url], check=False)
    except OSError as exc:
        raise UpdateError("Failed to run curl") from exc
    if result.returncode != 0:
        raise UpdateError(f"curl download failed for {url}")


def _is_sha256(text: str) -> bool:
    return len(text) == 64 and all(ch in "0123456789abcdef" for ch in text)


def parse_checksum_output(output: str) -> str:
    """First SHA-256 hex digest in a checksum tool's output, lower case; '' if none."""
    for line in output.splitlines():
        trimmed = line.strip().lower()
        if _is_sha256(trimmed):
            return trimmed
        words = trimmed.split()
        if words and _is_sha256(words[0]):
            return words[0]
    return ""


def _checksum_command(archive_name: str) -> list[str]:
    candidates = [
        ["shasum", "-a", "256", archive_name],
        ["sha256sum", archive_name],
        ["certutil", "-hashfile", archive_name, "SHA256"],
    ]
    for command in candidates:
        if shutil.which(command[0]):
            return command
    raise UpdateError("No checksum tool available (shasum, sha256sum, or certutil)")


def verify_checksum(directory: Path, archive_name: str) -> None:
    """Check ``archive_name`` in ``directory`` against its ``.sha256`` file."""
    directory = Path(directory)
    try:
        sha_content = (directory / f"{archive_name}.sha256").read_text()
    except OSError as exc:
        raise UpdateError("Failed to read checksum file") from exc

    words = sha_content.split()
    expected = words[0].lower() if words else ""
    if not expected:
        raise UpdateError("Empty checksum file")

    command = _checksum_command(archive_name)
    try:
        result = subprocess.run(command, cwd=directory, capture_output=True, check=False)
    except OSError as exc:
        raise UpdateError("No checksum tool available (shasum, sha256sum, or certutil)") from exc
    if result.returncode != 0:
        raise UpdateError("Checksum tool failed")

    computed = parse_checksum_output(result.stdout.decode("utf-8", errors="replace"))
    if computed != expected:
        raise UpdateError(f"Checksum mismatch: expected {expected}, got {computed}")