"""Local script discovery."""

from bitbridge.workspace.scanner import ScriptFile, collect_scripts, remote_filename, walk_scripts

__all__ = ["ScriptFile", "collect_scripts", "remote_filename", "walk_scripts"]
