"""Tests for `sankeyview vendor`."""

from __future__ import annotations

import httpx
import pytest

typer = pytest.importorskip("typer")

from typer.testing import CliRunner  # noqa: E402

from sankeyview.cli import create_app, vendor_cmd  # noqa: E402

runner_cli = CliRunner()


class TestVendor:
    def test_writes_into_dest(self, tmp_path, monkeypatch):
        calls = []

        def fake_download(target, **versions):
            calls.append((target, versions))
            written = []
            for name in ("d3.min.js", "d3-sankey.min.js"):
                path = target / name
                path.write_text("/* js */")
                written.append(path)
            return written

        monkeypatch.setattr(vendor_cmd, "download_assets", fake_download)
        result = runner_cli.invoke(create_app(), ["vendor", "--dest", str(tmp_path), "--d3-version", "7.8.5"])

        assert result.exit_code == 0, result.output
        assert calls == [(tmp_path, {"d3_version": "7.8.5", "d3_sankey_version": "0.12.3"})]
        assert f"Saved {tmp_path / 'd3.min.js'} (8B)" in result.output

    def test_network_failure_exits(self, tmp_path, monkeypatch):
        def failing_download(target, **versions):
            raise httpx.ConnectError("no route to host")

        monkeypatch.setattr(vendor_cmd, "download_assets", failing_download)
        result = runner_cli.invoke(create_app(), ["vendor", "--dest", str(tmp_path)])

        assert result.exit_code == 1
        assert "download failed" in result.output
