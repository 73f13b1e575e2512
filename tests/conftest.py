# textdiag:header:start
#
#   project      : TextDiag
#   file         : conftest.py
#   file_relpath : tests/conftest.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# textdiag:header:end

"""Pytest configuration for the TextDiag test suite.

This file sets up global fixtures and customizes the logging configuration for test runs,
ensuring consistent and verbose logging output during testing.

Notes:
    Tests should respect the immutable/mutable options split:

    - Build options using `textdiag.config.MutableDiagnosticOptions` (mutable), then
      `freeze()` into `textdiag.config.DiagnosticOptions` for the renderer.
    - Do **not** mutate frozen options. If you need to tweak them, call
      `DiagnosticOptions.thaw()`, edit the returned builder, then `freeze()` again.
"""

from __future__ import annotations

import io
from collections.abc import Callable
from typing import TYPE_CHECKING, Any, TypeVar, cast

import pytest

from textdiag.config import MutableDiagnosticOptions, logging
from textdiag.rendering.emitter import TextDiagnostic

if TYPE_CHECKING:
    from collections.abc import Sequence
    from pathlib import Path

    from textdiag.config import DiagnosticOptions
    from textdiag.diagnostic.model import FixItHint, Severity
    from textdiag.source.manager import SourceManagerLike
    from textdiag.source.model import Location, SourceRange

F = TypeVar("F", bound=Callable[..., object])

# This defines the type for the decorator function itself:
# It takes a Callable (F) and returns the same Callable (F).
DecoratorType = Callable[[F], F]


def as_typed_mark(mark: Any) -> DecoratorType[Any]:
    """Wrap a pytest mark so static type checkers preserve the function type.

    Args:
        mark (Any): A pytest mark decorator such as `pytest.mark.integration`.

    Returns:
        DecoratorType[Any]: A decorator that preserves the wrapped function's type.
    """

    def _decorator(func: F) -> F:
        return cast("F", mark(func))

    return _decorator


mark_integration: DecoratorType[Any] = as_typed_mark(pytest.mark.integration)
mark_cli: DecoratorType[Any] = as_typed_mark(pytest.mark.cli)


def parametrize(*args: Any, **kwargs: Any) -> Callable[[F], F]:
    """Typed wrapper for `pytest.mark.parametrize`.

    Args:
        *args (Any): Positional arguments forwarded to `pytest.mark.parametrize`.
        **kwargs (Any): Keyword arguments forwarded to `pytest.mark.parametrize`.

    Returns:
        Callable[[F], F]: A decorator that preserves the wrapped function's type.
    """
    mark: pytest.MarkDecorator = pytest.mark.parametrize(*args, **kwargs)
    return as_typed_mark(mark)


def hookimpl(*args: Any, **kwargs: Any) -> Callable[[F], F]:
    """Typed wrapper for `pytest.hookimpl`.

    Args:
        *args (Any): Positional arguments forwarded to `pytest.hookimpl`.
        **kwargs (Any): Keyword arguments forwarded to `pytest.hookimpl`.

    Returns:
        Callable[[F], F]: A decorator that preserves the wrapped function's type.
    """
    return as_typed_mark(pytest.hookimpl(*args, **kwargs))


def fixture(*args: Any, **kwargs: Any) -> Callable[[F], F]:
    """Typed wrapper for `pytest.fixture`.

    Args:
        *args (Any): Positional arguments forwarded to `pytest.fixture`.
        **kwargs (Any): Keyword arguments forwarded to `pytest.fixture`.

    Returns:
        Callable[[F], F]: A decorator that preserves the wrapped function's type.
    """
    return as_typed_mark(pytest.fixture(*args, **kwargs))


@pytest.fixture(autouse=True)
def silence_textdiag_logging(monkeypatch: pytest.MonkeyPatch) -> None:
    """Ensure TextDiag's runtime log level and colors are not forced via env during tests.

    This avoids accidental DEBUG/TRACE noise when the developer has exported
    TEXTDIAG_LOG_LEVEL in their shell, and keeps CLI color detection on its
    TTY fallback.

    Args:
        monkeypatch (pytest.MonkeyPatch): Pytest monkeypatch fixture used to manipulate
            environment variables.
    """
    monkeypatch.delenv(logging.LOG_LEVEL_ENV_VAR, raising=False)
    monkeypatch.delenv("FORCE_COLOR", raising=False)
    monkeypatch.delenv("NO_COLOR", raising=False)


@hookimpl(tryfirst=True)
def pytest_configure(config: pytest.Config) -> None:  # pylint: disable=unused-argument
    """Configure pytest settings and customize logging for the test suite.

    This function sets the logging level to TRACE for all tests,
    ensuring detailed output is captured during test execution.

    Args:
        config (pytest.Config): The pytest configuration object.
    """
    logging.setup_logging(level=logging.TRACE_LEVEL)


@pytest.fixture
def isolation(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run a test in an isolated temporary working directory.

    The directory holds a ``textdiag.toml`` marked as the configuration root so
    that config discovery never walks above the test directory.

    Args:
        tmp_path (Path): The pytest-provided temporary directory for the test.
        monkeypatch (pytest.MonkeyPatch): Fixture to change the working directory.

    Returns:
        Path: The isolated working directory.
    """
    cwd: Path = tmp_path / "proj"
    cwd.mkdir()
    (cwd / "textdiag.toml").write_text("root = true\n", encoding="utf-8")
    monkeypatch.chdir(cwd)
    return cwd


def make_options(**overrides: Any) -> DiagnosticOptions:
    """Return frozen rendering options built from defaults and overrides.

    Args:
        **overrides (Any): `MutableDiagnosticOptions` field values.

    Returns:
        DiagnosticOptions: An immutable options snapshot.
    """
    return MutableDiagnosticOptions(**overrides).freeze()


def make_renderer(
    sm: SourceManagerLike,
    **overrides: Any,
) -> tuple[TextDiagnostic, io.StringIO]:
    """Return a renderer writing to a fresh string buffer.

    Args:
        sm (SourceManagerLike): Location service.
        **overrides (Any): Option overrides (see `make_options`).

    Returns:
        tuple[TextDiagnostic, io.StringIO]: The renderer and its output buffer.
    """
    out = io.StringIO()
    return TextDiagnostic(out, sm, make_options(**overrides)), out


def render_one(
    sm: SourceManagerLike,
    location: Location,
    severity: Severity,
    message: str,
    ranges: Sequence[SourceRange] = (),
    fixits: Sequence[FixItHint] = (),
    **overrides: Any,
) -> str:
    """Render one diagnostic with a fresh renderer and return the text.

    Args:
        sm (SourceManagerLike): Location service.
        location (Location): Primary location.
        severity (Severity): Severity.
        message (str): Message text.
        ranges (Sequence[SourceRange]): Highlighted ranges.
        fixits (Sequence[FixItHint]): Fix-it hints.
        **overrides (Any): Option overrides (see `make_options`).

    Returns:
        str: The rendered output.
    """
    renderer, out = make_renderer(sm, **overrides)
    renderer.emit(location, severity, message, ranges, fixits)
    return out.getvalue()
