import json

from typer.testing import CliRunner

from ofdling.cli.main import app

runner = CliRunner()


def test_cli_help():
    result = runner.invoke(app, ["--help"])
    assert result.exit_code == 0


def test_cli_version():
    result = runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert "ofdling version" in result.stdout


def test_cli_info(sample_ofd):
    result = runner.invoke(app, [str(sample_ofd), "--indent", "0"])
    assert result.exit_code == 0
    snapshot = json.loads(result.stdout)
    assert snapshot["attributes"]["Title"] == "Electronic invoice"
    assert snapshot["custom_datas"] == {"InvoiceNo": "04591234", "Amount": "100.00"}


def test_cli_output_file(sample_ofd, tmp_path):
    output = tmp_path / "meta.json"
    result = runner.invoke(app, [str(sample_ofd), "--output", str(output), "--pages"])
    assert result.exit_code == 0
    assert output.exists()
    snapshot = json.loads(output.read_text(encoding="utf-8"))
    assert snapshot["attributes"]["Keywords"] == "invoice,vat"


def test_cli_missing_file(tmp_path):
    result = runner.invoke(app, [str(tmp_path / "missing.ofd")])
    assert result.exit_code != 0


def test_cli_invalid_archive(make_ofd):
    path = make_ofd({"OFD.xml": None})
    result = runner.invoke(app, [str(path)])
    assert result.exit_code != 0
