"""Tests for logging setup."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import pytest
from rich.logging import RichHandler

from crate_inspector.utils.log_setup import setup_logging

if TYPE_CHECKING:
	from collections.abc import Iterator
	from pathlib import Path


@pytest.fixture(autouse=True)
def restore_root_logger() -> Iterator[None]:
	"""Remove the handlers a test installed on the root logger."""
	root_logger = logging.getLogger()
	handlers = root_logger.handlers[:]
	level = root_logger.level
	yield
	for handler in root_logger.handlers[:]:
		if handler not in handlers and isinstance(handler, (RichHandler, logging.FileHandler)):
			root_logger.removeHandler(handler)
			handler.close()
	root_logger.setLevel(level)


@pytest.mark.unit
class TestSetupLogging:
	def test_console_handler_levels(self) -> None:
		setup_logging(is_verbose=False)
		(handler,) = logging.getLogger().handlers
		assert isinstance(handler, RichHandler)
		assert handler.level == logging.WARNING

		setup_logging(is_verbose=True)
		(handler,) = logging.getLogger().handlers
		assert handler.level == logging.DEBUG

	def test_leaves_other_loggers_alone(self) -> None:
		before = logging.getLogger("urllib3").level
		setup_logging(is_verbose=True)
		assert logging.getLogger("urllib3").level == before

	@pytest.mark.fs
	def test_file_logging(self, tmp_path: Path) -> None:
		log_file = tmp_path / "logs" / "run.log"
		setup_logging(log_to_console=False, log_file_path=log_file)

		root_logger = logging.getLogger()
		assert root_logger.level == logging.DEBUG
		(handler,) = root_logger.handlers
		assert isinstance(handler, logging.FileHandler)

		logging.getLogger("crate_inspector.test").debug("written to file")
		handler.flush()
		assert "written to file" in log_file.read_text(encoding="utf-8")
