#!/usr/bin/env python3
"""
Logging setup and the horizon coverage example script.
"""

import json
import logging

import pandas as pd
import pytest

from specgr.domain import Sphere, block_logical_coordinates
from specgr.examples.horizon_coverage import main
from specgr.logging_config import JSONFormatter, setup_logging


def test_json_formatter():
    record = logging.LogRecord("specgr.domain", logging.INFO, __file__, 1,
                               "%d points unmapped", (3,), None)
    entry = json.loads(JSONFormatter().format(record))
    assert entry["level"] == "INFO"
    assert entry["logger"] == "specgr.domain"
    assert entry["message"] == "3 points unmapped"


def test_setup_logging_replaces_handlers(tmp_path):
    log_file = tmp_path / "specgr.log"
    logger = setup_logging(level=logging.DEBUG, json_format=True, log_file=str(log_file))
    assert len(logger.handlers) == 2
    logger = setup_logging(level=logging.INFO)
    assert len(logger.handlers) == 1
    assert logger.level == logging.INFO
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)


def test_unmapped_points_are_logged(caplog):
    domain = Sphere(1.0, 2.0).create_domain()
    with caplog.at_level(logging.INFO, logger="specgr.domain"):
        coords = block_logical_coordinates(domain, [[0.0, 5.0], [0.0, 0.0], [1.5, 0.0]])
    assert coords[1] is None
    assert "1 of 2 points are outside every block" in caplog.text


def test_horizon_coverage_script(tmp_path, capsys):
    df = main(["--l-max", "6", "--out-dir", str(tmp_path)])
    assert list(df["shell"]) == ["all", "some", "none"]
    assert (df["total"] == 7 * 13).all()
    row = df.set_index("shell")
    assert row.loc["all", "unmapped"] == 0
    assert row.loc["none", "mapped"] == 0
    assert 0 < row.loc["some", "mapped"] < 7 * 13

    saved = pd.read_csv(tmp_path / "coverage.csv")
    assert list(saved["mapped"]) == list(df["mapped"])
    assert "Kerr horizon coverage" in capsys.readouterr().out


def test_horizon_coverage_script_rejects_unknown_ordering():
    with pytest.raises(SystemExit):
        main(["--ordering", "Spiral"])
