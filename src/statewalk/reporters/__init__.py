"""Reporters for search results."""

from statewalk.reporters.console import ConsoleReporter
from statewalk.reporters.json import JSONReporter

__all__ = ["ConsoleReporter", "JSONReporter"]
