"""
Test CLI: `lazy-wavepacket info` / `lazy-wavepacket scatter`
"""

import json

from typer.testing import CliRunner

from lazy_wavepacket.cli import app


runner = CliRunner()


def test_info():
    result = runner.invoke(app, ["info"])
    assert result.exit_code == 0
    assert "lazy-wavepacket" in result.output
    assert "DeferredProduct" in result.output


def test_scatter_writes_json(tmp_path):
    out = tmp_path / "result.json"
    result = runner.invoke(app, [
        "scatter", "-N", "64", "--tmax", "2", "--steps", "3", "-o", str(out),
    ])
    assert result.exit_code == 0, result.output
    assert "Transmitted" in result.output

    data = json.loads(out.read_text())
    assert data['config']['n'] == 64
    assert len(data['times']) == 3
    assert len(data['norms']) == 3
    assert set(data['split']) == {'reflected', 'inside', 'transmitted'}
    assert abs(data['norms'][-1] - 1.0) < 1e-6


def test_scatter_invalid_grid():
    result = runner.invoke(app, [
        "scatter", "--xmin", "1", "--xmax", "0", "--steps", "2",
    ])
    assert result.exit_code == 1


def test_scatter_unknown_method():
    result = runner.invoke(app, [
        "scatter", "-N", "32", "--steps", "2", "--method", "bogus",
    ])
    assert result.exit_code == 1
