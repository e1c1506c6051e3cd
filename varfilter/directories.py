"""
Host and directory accessors used by the common handler.

Every accessor is evaluated when called, so values track the live
process state (current directory, environment overrides).
"""

import os
import sys
import tempfile
from pathlib import Path
from typing import Optional


GLOBALDIR_ENV = 'VARFILTER_GLOBALDIR'
CONFIGDIR_ENV = 'VARFILTER_CONFIGDIR'
PROGRAMDIR_ENV = 'VARFILTER_PROGRAMDIR'

CONFIG_DIRNAME = '.varfilter'


def host_platform() -> str:
    """Normalised host name: linux, macosx, windows, or sys.platform."""
    if sys.platform.startswith('linux'):
        return 'linux'
    elif sys.platform == 'darwin':
        return 'macosx'
    elif sys.platform in ('win32', 'cygwin', 'msys'):
        return 'windows'
    return sys.platform


class Directories:
    """
    Directory accessors for one project.

    Attributes:
        project_dir: Project root, or None to follow the current directory
        script_dir: Directory of the running script, or None for curdir
    """

    def __init__(self, project_dir: Optional[Path] = None, script_dir: Optional[Path] = None):
        self.project_dir = Path(project_dir) if project_dir is not None else None
        self.script_dir = Path(script_dir) if script_dir is not None else None

    def host(self) -> str:
        return host_platform()

    def tmpdir(self) -> str:
        return tempfile.gettempdir()

    def curdir(self) -> str:
        return os.getcwd()

    def scriptdir(self) -> str:
        if self.script_dir is not None:
            return str(self.script_dir)
        return self.curdir()

    def programdir(self) -> str:
        override = os.environ.get(PROGRAMDIR_ENV)
        if override:
            return override
        return str(Path(__file__).resolve().parent)

    def globaldir(self) -> str:
        override = os.environ.get(GLOBALDIR_ENV)
        if override:
            return override
        return str(Path.home() / CONFIG_DIRNAME)

    def projectdir(self) -> str:
        if self.project_dir is not None:
            return str(self.project_dir)
        return self.curdir()

    def configdir(self) -> str:
        override = os.environ.get(CONFIGDIR_ENV)
        if override:
            return override
        return str(Path(self.projectdir()) / CONFIG_DIRNAME)
