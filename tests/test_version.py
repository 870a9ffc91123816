from typer.testing import CliRunner

import fontslice
from fontslice.ui.cli import app


def test_get_version_matches_public_api() -> None:
    assert fontslice.get_version() == fontslice.__version__
    assert isinstance(fontslice.__version__, str)


def test_cli_version_flag() -> None:
    runner = CliRunner()
    result = runner.invoke(app, ["--version"])

    assert result.exit_code == 0, result.stdout
    assert result.stdout.strip() == fontslice.get_version()
