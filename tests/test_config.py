"""
Tests for configuration loading and logging setup.
"""

import json
import logging

import pytest

from tabatmo.config import (
    AtmosphereConfig,
    TableConfig,
    build_atmosphere,
    load_config,
)
from tabatmo.errors import SourceUnavailableError
from tabatmo.logging_config import PACKAGE_LOGGER, setup_logging
from tabatmo.tables import ussa1976_table_path


class TestLoadConfig:

    def test_defaults(self):
        cfg = load_config(None)
        assert cfg.table.files == {}
        assert cfg.table.resolved_files() == {0: ussa1976_table_path()}
        assert cfg.constants.gas_constant == 287.0
        assert cfg.logging.level == "INFO"

    def test_relative_paths_resolved(self, tmp_path):
        (tmp_path / "tables").mkdir()
        (tmp_path / "tables" / "t.dat").write_text("0 200\n1000 190\n")
        path = tmp_path / "atm.json"
        path.write_text(json.dumps({
            "table": {"files": {"0": "tables/t.dat"},
                      "dependent_variables": ["temperature"]},
            "constants": {"gas_constant": 188.92, "specific_heat_ratio": 1.29},
        }))
        cfg = load_config(path)
        assert cfg.table.files == {0: str(tmp_path / "tables" / "t.dat")}

        atm = build_atmosphere(cfg)
        assert atm.get_temperature(500.0) == pytest.approx(195.0)
        assert atm.gas_constant == 188.92
        assert atm.specific_heat_ratio == 1.29

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "nope.json")

    def test_not_json(self, tmp_path):
        path = tmp_path / "atm.yaml"
        path.write_text("table: {}\n")
        with pytest.raises(ValueError):
            load_config(path)

    def test_root_not_object(self, tmp_path):
        path = tmp_path / "atm.json"
        path.write_text("[1, 2]")
        with pytest.raises(ValueError):
            load_config(path)

    def test_non_integer_file_key(self):
        with pytest.raises(ValueError):
            TableConfig(files={"density": "d.dat"})

    def test_unknown_key(self, tmp_path):
        path = tmp_path / "atm.json"
        path.write_text(json.dumps({"table": {"fils": {"0": "t.dat"}}}))
        with pytest.raises(ValueError, match="fils"):
            load_config(path)

    def test_section_not_object(self):
        with pytest.raises(ValueError):
            AtmosphereConfig.from_dict({"constants": [287.0, 1.4]})

    def test_round_trip_dict(self):
        cfg = AtmosphereConfig.from_dict({"logging": {"level": "DEBUG"}})
        again = AtmosphereConfig.from_dict(cfg.to_dict())
        assert again == cfg
        assert again.logging.level == "DEBUG"

    def test_missing_table_surfaces_on_build(self, tmp_path):
        cfg = AtmosphereConfig(table=TableConfig(files={0: str(tmp_path / "x.dat")}))
        with pytest.raises(SourceUnavailableError):
            build_atmosphere(cfg)


class TestSetupLogging:

    def test_level_by_name(self):
        logger = setup_logging("debug")
        assert logger.name == PACKAGE_LOGGER
        assert logger.level == logging.DEBUG
        assert len(logger.handlers) == 1

    def test_repeated_calls_do_not_stack_handlers(self, tmp_path):
        setup_logging(logging.INFO)
        logger = setup_logging(logging.INFO, log_file=str(tmp_path / "run.log"))
        assert len(logger.handlers) == 2
        logging.getLogger("tabatmo.atmosphere").info("hello")
        for handler in logger.handlers:
            handler.flush()
        assert "hello" in (tmp_path / "run.log").read_text()
        setup_logging(logging.WARNING)

    def test_unknown_level(self):
        with pytest.raises(ValueError):
            setup_logging("chatty")
