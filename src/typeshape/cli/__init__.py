"""
CLI support modules: mode configuration and output presenters.
"""

from typeshape.cli.config import CLIConfig
from typeshape.cli.output import ConsolePresenter, RecordingPresenter

__all__ = ['CLIConfig', 'ConsolePresenter', 'RecordingPresenter']
