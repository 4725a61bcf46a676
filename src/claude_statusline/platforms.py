"""Host platform detection.

The platform only decides which icon set the statusline uses: MINGW/MSYS/Cygwin
terminals on Windows rarely render emoji, so they get plain ASCII glyphs.

Set STATUSLINE_PLATFORM to one of macos, linux, wsl, mingw, unknown to skip
detection entirely.
"""

import os
import platform
import sys
from collections.abc import Mapping
from enum import StrEnum
from pathlib import Path

PLATFORM_ENV_VAR = "STATUSLINE_PLATFORM"
PROC_VERSION = Path("/proc/version")


class Platform(StrEnum):
    MACOS = "macos"
    LINUX = "linux"
    WSL = "wsl"
    MINGW = "mingw"
    UNKNOWN = "unknown"


def is_wsl(proc_version: Path = PROC_VERSION) -> bool:
    """Check the kernel version string for the Microsoft marker WSL kernels carry."""
    try:
        return "microsoft" in proc_version.read_text().lower()
    except OSError:
        return False


def classify_os_type(os_type: str, proc_version: Path = PROC_VERSION) -> Platform | None:
    """Map an OS-type string ($OSTYPE, sys.platform, uname -s) to a Platform.

    Returns None when the string doesn't match any known prefix.
    """
    os_type = os_type.lower()
    if os_type.startswith("darwin"):
        return Platform.MACOS
    if os_type.startswith("linux"):
        return Platform.WSL if is_wsl(proc_version) else Platform.LINUX
    if os_type.startswith(("msys", "mingw", "cygwin")):
        return Platform.MINGW
    return None


def _platform_override(environ: Mapping[str, str]) -> Platform | None:
    value = environ.get(PLATFORM_ENV_VAR, "").strip().lower()
    if not value:
        return None
    try:
        return Platform(value)
    except ValueError:
        # unrecognized override: fall through to auto-detection
        return None


def detect_platform(
    environ: Mapping[str, str] | None = None, proc_version: Path = PROC_VERSION
) -> Platform:
    """Classify the host platform.

    Precedence: STATUSLINE_PLATFORM override, then $OSTYPE (bash exports it in
    some setups; sys.platform otherwise), then the kernel name reported by uname.
    """
    if environ is None:
        environ = os.environ

    override = _platform_override(environ)
    if override is not None:
        return override

    os_type = environ.get("OSTYPE") or sys.platform
    detected = classify_os_type(os_type, proc_version)
    if detected is not None:
        return detected

    try:
        kernel = platform.system()
    except OSError:
        return Platform.UNKNOWN
    return classify_os_type(kernel, proc_version) or Platform.UNKNOWN
