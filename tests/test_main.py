"""
Tests for the command line entry point.
"""

import json
import logging

import pytest
import structlog

from stocksignals.main import load_bars, main


@pytest.fixture(autouse=True)
def reset_logging():
    """Drop handlers installed by main() so tests stay independent."""
    structlog.reset_defaults()
    yield
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
        handler.close()


@pytest.fixture
def csv_file(tmp_path, trending_closes):
    path = tmp_path / "AAPL.csv"
    lines = ["date,open,high,low,close,volume"]
    for i, close in enumerate(trending_closes):
        day = f"2024-{1 + i // 28:02d}-{1 + i % 28:02d}"
        lines.append(f"{day},{close},{close + 1},{close - 1},{close},{1000 + i}")
    path.write_text("\n".join(lines) + "\n")
    return path


@pytest.fixture
def json_file(tmp_path, sample_bars):
    path = tmp_path / "MSFT.json"
    path.write_text(json.dumps([bar.to_dict() for bar in sample_bars]))
    return path


@pytest.mark.integration
class TestLoadBars:
    """Tests for load_bars."""

    def test_load_csv(self, csv_file, trending_closes):
        bars = load_bars(csv_file)

        assert len(bars) == len(trending_closes)
        assert bars[0].close == pytest.approx(trending_closes[0])

    def test_load_json(self, json_file, sample_bars):
        assert load_bars(json_file) == sample_bars

    def test_unsupported_suffix(self, tmp_path):
        path = tmp_path / "bars.txt"
        path.write_text("")

        with pytest.raises(ValueError, match="Unsupported input format"):
            load_bars(path)

    def test_csv_without_date_column(self, tmp_path):
        path = tmp_path / "nodates.csv"
        path.write_text("open,high,low,close,volume\n1,2,0.5,1.5,100\n")

        with pytest.raises(ValueError, match="no date column"):
            load_bars(path)

    def test_json_must_be_list(self, tmp_path):
        path = tmp_path / "bars.json"
        path.write_text(json.dumps({"date": "2024-01-01"}))

        with pytest.raises(ValueError, match="list of bar records"):
            load_bars(path)


@pytest.mark.integration
class TestMain:
    """Tests for the CLI run."""

    def test_summary_output(self, csv_file, capsys):
        exit_code = main([str(csv_file)])

        assert exit_code == 0
        output = json.loads(capsys.readouterr().out)
        assert set(output) == {"summary"}
        assert output["summary"]["trend"] == "bullish"
        assert output["summary"]["last_rsi"] == 100.0

    def test_series_output(self, json_file, sample_bars, capsys):
        exit_code = main([str(json_file), "--series", "--indicators", "rsi"])

        assert exit_code == 0
        output = json.loads(capsys.readouterr().out)
        indicators = output["indicators"]
        assert len(indicators["historical_data"]) == len(sample_bars)
        assert len(indicators["rsi"]) == len(sample_bars)
        assert indicators["rsi"][0] is None
        assert "sma20" not in indicators
        assert output["summary"]["support"] is None

    def test_missing_file(self, tmp_path, capsys):
        exit_code = main([str(tmp_path / "missing.csv")])

        assert exit_code == 1
        captured = capsys.readouterr()
        assert captured.out == ""
        assert "bars_load_failed" in captured.err

    def test_malformed_records(self, tmp_path, capsys):
        path = tmp_path / "bad.json"
        path.write_text(json.dumps([{"close": 10.0}]))

        assert main([str(path)]) == 1
        assert "missing a date" in capsys.readouterr().err
