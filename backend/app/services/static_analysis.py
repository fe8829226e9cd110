"""
Static syntax and style checks for submissions.

Two implementations sit behind the StaticAnalyzer interface:
- NativeAnalyzer: deterministic line-based heuristics, always available.
- ExternalToolAnalyzer: runs pyflakes (syntax pass) and pylint (style pass) on a
  temporary copy of the submission. Any failure of a tool (missing module,
  crash, timeout, I/O error) falls back to the native check for that pass.

Submitted code is only ever read, never executed.
"""

from __future__ import annotations

import importlib.util
import logging
import re
import subprocess
import sys
import tempfile
import time
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Callable, Iterable, List, Optional, Tuple

from ..models.linting import CheckOutcome, LintSeverity

logger = logging.getLogger(__name__)

MAX_LINE_LENGTH = 120

_CONTROL_HEADER = re.compile(r"^(if|for|while|def|class|elif|else|try|except|finally|with)\s+.*[^:]$")
_TRAILING_COMMENT = re.compile(r"\s+#[^'\"]*$")
_LEADING_WHITESPACE = re.compile(r"^(\s*)")


class StaticAnalyzer(ABC):
    """Base class for syntax/style checkers."""

    name: str = "base"

    @abstractmethod
    def check_syntax(self, code: str) -> CheckOutcome:
        """Report syntax-level problems."""

    @abstractmethod
    def check_style(self, code: str) -> CheckOutcome:
        """Report style-level problems."""

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}(name={self.name})>"


class NativeAnalyzer(StaticAnalyzer):
    """Line-based fallback checks with no external dependency."""

    name = "builtin"

    def check_syntax(self, code: str) -> CheckOutcome:
        outcome = CheckOutcome()

        for number, raw_line in enumerate(code.split("\n"), start=1):
            line = raw_line.strip()
            if not line or line.startswith("#"):
                continue

            if line.count("(") != line.count(")"):
                outcome.errors.append(f"Unmatched parentheses on line {number}")

            # Triple-quoted lines are skipped: their quote counts say nothing
            if '"""' not in line and "'''" not in line:
                if line.count("'") % 2 != 0:
                    outcome.errors.append(f"Unmatched single quotes on line {number}")
                if line.count('"') % 2 != 0:
                    outcome.errors.append(f"Unmatched double quotes on line {number}")

            if _CONTROL_HEADER.match(_TRAILING_COMMENT.sub("", line)):
                outcome.errors.append(f"Missing colon on line {number}")

        return outcome

    def check_style(self, code: str) -> CheckOutcome:
        outcome = CheckOutcome()
        lines = code.split("\n")

        has_spaces = False
        has_tabs = False
        for line in lines:
            if line.strip():
                indent = _LEADING_WHITESPACE.match(line).group(1)
                has_spaces = has_spaces or " " in indent
                has_tabs = has_tabs or "\t" in indent

        if has_spaces and has_tabs:
            outcome.warnings.append("Inconsistent indentation (mixing spaces and tabs)")

        for number, line in enumerate(lines, start=1):
            if len(line) > MAX_LINE_LENGTH:
                outcome.warnings.append(f"Line {number} is too long ({len(line)} characters)")

        return outcome


class ExternalToolAnalyzer(StaticAnalyzer):
    """
    pyflakes/pylint-backed checks with per-pass fallback to NativeAnalyzer.

    Each run writes the submission to a uniquely named temp file which is removed
    before the check returns, whatever the outcome.
    """

    name = "external"

    PYFLAKES_MODULE = "pyflakes"
    PYLINT_MODULE = "pylint"
    PYLINT_ARGS = [
        "--disable=all",
        "--enable=unused-variable,undefined-variable,unused-import",
        "--score=n",
    ]

    # pylint sets bit 32 on usage errors; pyflakes exits 1 when it reports anything
    PYLINT_USAGE_ERROR = 32

    _PYLINT_ERROR_ID = re.compile(r"\b[EF]\d{4}\b")
    _PYLINT_WARNING_ID = re.compile(r"\b[WCR]\d{4}\b")

    def __init__(self, timeout: float = 5.0, fallback: Optional[StaticAnalyzer] = None):
        self.timeout = timeout
        self.fallback = fallback or NativeAnalyzer()

    def check_syntax(self, code: str) -> CheckOutcome:
        streams = self._run_tool(
            self.PYFLAKES_MODULE,
            [],
            code,
            accept_exit=lambda rc: rc in (0, 1),
        )
        if streams is None:
            return self.fallback.check_syntax(code)

        stdout_lines, stderr_lines = streams
        # pyflakes prints syntax problems on stderr, every other finding on stdout
        outcome = self._classify(stdout_lines, self._classify_pyflakes_line)
        for line in stderr_lines:
            outcome.add(LintSeverity.ERROR, line)
        return outcome

    def check_style(self, code: str) -> CheckOutcome:
        streams = self._run_tool(
            self.PYLINT_MODULE,
            self.PYLINT_ARGS,
            code,
            accept_exit=lambda rc: rc >= 0 and not rc & self.PYLINT_USAGE_ERROR,
        )
        if streams is None:
            return self.fallback.check_style(code)

        stdout_lines, stderr_lines = streams
        return self._classify(stdout_lines + stderr_lines, self._classify_pylint_line)

    @staticmethod
    def _classify(lines: Iterable[str], classify: Callable[[str], Optional[LintSeverity]]) -> CheckOutcome:
        outcome = CheckOutcome()
        for line in lines:
            severity = classify(line)
            if severity is not None:
                outcome.add(severity, line)
        return outcome

    @staticmethod
    def _classify_pyflakes_line(line: str) -> Optional[LintSeverity]:
        if "error" in line or "Error" in line:
            return LintSeverity.ERROR
        return LintSeverity.WARNING

    @classmethod
    def _classify_pylint_line(cls, line: str) -> Optional[LintSeverity]:
        if cls._PYLINT_ERROR_ID.search(line) or "error" in line or "Error" in line or "E:" in line:
            return LintSeverity.ERROR
        if cls._PYLINT_WARNING_ID.search(line) or "warning" in line or "W:" in line:
            return LintSeverity.WARNING
        return None

    def _run_tool(
        self,
        module: str,
        args: List[str],
        code: str,
        accept_exit: Callable[[int], bool],
    ) -> Optional[Tuple[List[str], List[str]]]:
        """
        Run `python -m <module>` on a temp copy of the code.

        Returns:
            (stdout, stderr) diagnostic lines that reference the temp file, or
            None when the tool could not produce a usable result.
        """
        try:
            temp_path = self._write_temp_file(code)
        except OSError as e:
            logger.info(f"Could not stage code for {module} ({e}), using builtin checks")
            return None

        try:
            proc = subprocess.run(
                [sys.executable, "-m", module, *args, str(temp_path)],
                capture_output=True,
                text=True,
                encoding="utf-8",
                timeout=self.timeout,
                check=False,
            )
        except subprocess.TimeoutExpired:
            logger.info(f"{module} timed out after {self.timeout}s, using builtin checks")
            return None
        except OSError as e:
            logger.info(f"{module} could not be started ({e}), using builtin checks")
            return None
        finally:
            self._remove_temp_file(temp_path)

        stderr = proc.stderr or ""
        if "No module named" in stderr or not accept_exit(proc.returncode):
            logger.info(f"{module} unavailable (exit {proc.returncode}), using builtin checks")
            return None

        def diagnostics(output: str) -> List[str]:
            return [line.strip() for line in output.splitlines() if temp_path.name in line]

        return diagnostics(proc.stdout or ""), diagnostics(stderr)

    @staticmethod
    def _write_temp_file(code: str) -> Path:
        temp = tempfile.NamedTemporaryFile(
            mode="w",
            prefix=f"submission_{time.time_ns()}_",
            suffix=".py",
            encoding="utf-8",
            delete=False,
        )
        temp_path = Path(temp.name)
        try:
            with temp:
                temp.write(code)
        except OSError:
            ExternalToolAnalyzer._remove_temp_file(temp_path)
            raise
        return temp_path

    @staticmethod
    def _remove_temp_file(temp_path: Path) -> None:
        try:
            temp_path.unlink(missing_ok=True)
        except OSError as e:
            logger.warning(f"Failed to remove temp file {temp_path}: {e}")


def external_tools_available() -> bool:
    """True when both pyflakes and pylint are importable by this interpreter."""
    return all(
        importlib.util.find_spec(module) is not None
        for module in (ExternalToolAnalyzer.PYFLAKES_MODULE, ExternalToolAnalyzer.PYLINT_MODULE)
    )


def create_static_analyzer(mode: str = "auto", timeout: float = 5.0) -> StaticAnalyzer:
    """
    Build the analyzer for the configured mode.

    Args:
        mode: "builtin" (native only), "external" (tools with fallback), or
            "auto" (external when the tools are installed)
        timeout: Seconds allowed per external tool run

    Returns:
        A StaticAnalyzer instance
    """
    if mode == "builtin":
        analyzer: StaticAnalyzer = NativeAnalyzer()
    elif mode == "external":
        analyzer = ExternalToolAnalyzer(timeout=timeout)
    else:
        if mode != "auto":
            logger.warning(f"Unknown analyzer mode '{mode}', using auto")
        analyzer = ExternalToolAnalyzer(timeout=timeout) if external_tools_available() else NativeAnalyzer()

    logger.info(f"🔍 Static analyzer: {analyzer.name}")
    return analyzer
