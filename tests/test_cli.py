# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""CLI tests: subcommands, output formats, and error handling in cli.py."""
import csv
import sys
from datetime import date

import pytest

from hoshiyomi.cli import format_moon_info, main, run_calc, run_table
from hoshiyomi.domain.coordinate_frames import GeoPosition
from hoshiyomi.domain.moon_info import MoonInfo
from hoshiyomi.domain.settings import EphemerisSettings


OKAYAMA = GeoPosition(latitude_deg=34.54, longitude_deg=133.92)


class TestRunCalc:

    def test_age_only(self):
        age = run_calc(date(2000, 1, 7), None, EphemerisSettings())
        assert isinstance(age, float)
        assert age == pytest.approx(0.365124, abs=1e-5)

    def test_with_position(self):
        info = run_calc(date(2022, 7, 15), OKAYAMA, EphemerisSettings())
        assert isinstance(info, MoonInfo)
        text = format_moon_info(info)
        assert "Moon age:  16.0060 days" in text
        assert "Moonrise:  2022-07-15T20:58" in text

    def test_format_circumpolar(self):
        info = run_calc(date(2022, 7, 1), GeoPosition(80.0, 15.0), EphemerisSettings())
        assert "none (always above)" in format_moon_info(info)


class TestRunTable:

    def test_export_csv(self, tmp_path):
        path = str(tmp_path / "july.csv")
        infos = run_table(
            date(2022, 7, 1), date(2022, 7, 5), OKAYAMA, EphemerisSettings(),
            export_csv=path,
        )
        assert len(infos) == 5
        with open(path, newline='') as f:
            rows = list(csv.reader(f))
        assert len(rows) == 6
        assert rows[1][0] == '2022-07-01'


class TestCliCalc:

    def test_prints_age(self, capsys, monkeypatch):
        monkeypatch.setattr(sys, 'argv', ['hoshiyomi', 'calc', '--date', '2000-01-07'])
        main()
        assert capsys.readouterr().out.strip() == "0.3651"

    def test_equinox_age(self, capsys, monkeypatch):
        monkeypatch.setattr(sys, 'argv', ['hoshiyomi', 'calc', '--date', '2015-03-22'])
        main()
        assert capsys.readouterr().out.strip() == "1.7250"

    def test_zone_offset_option(self, capsys, monkeypatch):
        monkeypatch.setattr(
            sys, 'argv', ['hoshiyomi', '--zone-offset', '0', 'calc', '-d', '2000-01-07'],
        )
        main()
        assert capsys.readouterr().out.strip() == "0.7405"

    def test_prints_moon_info(self, capsys, monkeypatch):
        monkeypatch.setattr(sys, 'argv', [
            'hoshiyomi', 'calc', '--date', '2022-07-15',
            '--latitude', '34.54', '--longitude', '133.92',
        ])
        main()
        out = capsys.readouterr().out
        assert "Date:      2022-07-15" in out
        assert "Moonset:   2022-07-15T06:11" in out

    def test_invalid_latitude(self, capsys, monkeypatch):
        monkeypatch.setattr(sys, 'argv', [
            'hoshiyomi', 'calc', '--date', '2022-07-15',
            '--latitude', '95', '--longitude', '0',
        ])
        with pytest.raises(SystemExit) as exc_info:
            main()
        assert exc_info.value.code == 1
        assert "latitude" in capsys.readouterr().err

    def test_latitude_without_longitude(self, capsys, monkeypatch):
        monkeypatch.setattr(sys, 'argv', [
            'hoshiyomi', 'calc', '--date', '2022-07-15', '--latitude', '34.54',
        ])
        with pytest.raises(SystemExit) as exc_info:
            main()
        assert exc_info.value.code == 1
        assert "together" in capsys.readouterr().err

    def test_invalid_date(self, capsys, monkeypatch):
        monkeypatch.setattr(sys, 'argv', ['hoshiyomi', 'calc', '--date', '2022-02-30'])
        with pytest.raises(SystemExit) as exc_info:
            main()
        assert exc_info.value.code == 1
        assert "Error:" in capsys.readouterr().err

    def test_invalid_zone_offset(self, capsys, monkeypatch):
        monkeypatch.setattr(
            sys, 'argv', ['hoshiyomi', '--zone-offset', '20', 'calc', '-d', '2022-07-15'],
        )
        with pytest.raises(SystemExit) as exc_info:
            main()
        assert exc_info.value.code == 1

    def test_non_convergence(self, capsys, monkeypatch):
        monkeypatch.setattr(
            sys, 'argv', ['hoshiyomi', '--max-iterations', '1', 'calc', '-d', '2000-01-21'],
        )
        with pytest.raises(SystemExit) as exc_info:
            main()
        assert exc_info.value.code == 1
        assert "did not converge" in capsys.readouterr().err


class TestCliTable:

    def test_prints_rows(self, capsys, monkeypatch):
        monkeypatch.setattr(sys, 'argv', [
            'hoshiyomi', 'table', '--start', '2022-07-14', '--end', '2022-07-15',
            '--latitude', '34.54', '--longitude', '133.92',
        ])
        main()
        lines = capsys.readouterr().out.strip().splitlines()
        assert len(lines) == 2
        assert lines[1].startswith("2022-07-15  age  16.006")

    def test_export_message(self, tmp_path, capsys, monkeypatch):
        path = str(tmp_path / "out.csv")
        monkeypatch.setattr(sys, 'argv', [
            'hoshiyomi', 'table', '--start', '2022-07-01', '--end', '2022-07-03',
            '--latitude', '34.54', '--longitude', '133.92', '--export-csv', path,
        ])
        main()
        assert f"Exported 3 days to {path}" in capsys.readouterr().out

    def test_reversed_range(self, capsys, monkeypatch):
        monkeypatch.setattr(sys, 'argv', [
            'hoshiyomi', 'table', '--start', '2022-07-03', '--end', '2022-07-01',
            '--latitude', '34.54', '--longitude', '133.92',
        ])
        with pytest.raises(SystemExit) as exc_info:
            main()
        assert exc_info.value.code == 1


class TestCliServe:
    """CLI should handle port-in-use gracefully."""

    def test_port_in_use_message(self, capsys, monkeypatch):
        port = 9876
        monkeypatch.setattr(sys, 'argv', ['hoshiyomi', 'serve', '--port', str(port)])

        def mock_create_server(*args, **kwargs):
            e = OSError("[Errno 98] Address already in use")
            e.errno = 98
            raise e

        monkeypatch.setattr('hoshiyomi.cli.create_moon_server', mock_create_server)

        with pytest.raises(SystemExit) as exc_info:
            main()

        assert exc_info.value.code == 1
        captured = capsys.readouterr()
        assert str(port) in captured.err
        assert str(port + 1) in captured.err

    def test_serve_until_interrupt(self, capsys, monkeypatch):
        closed = []

        class FakeServer:
            def serve_forever(self):
                raise KeyboardInterrupt

            def server_close(self):
                closed.append(True)

        monkeypatch.setattr(sys, 'argv', ['hoshiyomi', 'serve', '--port', '50099'])
        monkeypatch.setattr('hoshiyomi.cli.create_moon_server', lambda *a, **k: FakeServer())
        main()
        out = capsys.readouterr().out
        assert "http://localhost:50099/api/moon-info" in out
        assert "Server stopped." in out
        assert closed == [True]

    def test_subcommand_required(self, monkeypatch):
        monkeypatch.setattr(sys, 'argv', ['hoshiyomi'])
        with pytest.raises(SystemExit) as exc_info:
            main()
        assert exc_info.value.code == 2
