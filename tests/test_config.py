"""
Tests for validation options and logging setup.
"""

import json
import logging

import pytest

from nachamview.config import ValidationOptions, configure_logging, load_validation_options


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in (
        "NACHAM_CHECK_TRANS_COUNT",
        "NACHAM_CHECK_DEBITS",
        "NACHAM_CHECK_CREDITS",
        "NACHAM_CHECK_CONTROL_TOTALS",
        "NACHAM_INCLUDE_ADDENDA_IN_TRANS",
        "NACHAM_SERIAL_FROM_NAME",
    ):
        monkeypatch.delenv(name, raising=False)


def test_defaults_enable_every_check():
    opts = ValidationOptions()

    assert opts.check_trans_count
    assert opts.check_debits
    assert opts.check_credits
    assert opts.check_control_totals
    assert opts.include_addenda_in_trans
    assert opts.serial_from_name == ""


def test_from_mapping_accepts_camel_case():
    opts = ValidationOptions.from_mapping({
        "checkTransCount": False,
        "checkDebitos": "false",
        "checkCreditos": 0,
        "checkTotalesControl": "yes",
        "includeAdendasInTrans": None,
        "serialFromName": 7,
        "unknownKey": True,
    })

    assert opts == ValidationOptions(
        check_trans_count=False,
        check_debits=False,
        check_credits=False,
        check_control_totals=True,
        include_addenda_in_trans=True,
        serial_from_name="7",
    )


def test_from_mapping_accepts_snake_case():
    opts = ValidationOptions.from_mapping({"check_debits": False})

    assert not opts.check_debits
    assert opts.check_credits


def test_merged_and_to_dict():
    opts = ValidationOptions().merged(serial_from_name="003")

    assert opts.to_dict()["serial_from_name"] == "003"
    assert ValidationOptions().serial_from_name == ""


def test_load_from_json_then_env(tmp_path, monkeypatch):
    path = tmp_path / "options.json"
    path.write_text(json.dumps({"checkCreditos": False, "checkDebitos": False}), encoding="utf-8")
    monkeypatch.setenv("NACHAM_CHECK_DEBITS", "true")
    monkeypatch.setenv("NACHAM_SERIAL_FROM_NAME", "012")

    opts = load_validation_options(path)

    assert not opts.check_credits
    assert opts.check_debits
    assert opts.serial_from_name == "012"


def test_missing_config_file_warns(tmp_path, caplog):
    with caplog.at_level(logging.WARNING, logger="nachamview.config"):
        opts = load_validation_options(tmp_path / "missing.json")

    assert opts == ValidationOptions()
    assert "not found" in caplog.text


def test_invalid_json_keeps_defaults(tmp_path, caplog):
    path = tmp_path / "broken.json"
    path.write_text("{not json", encoding="utf-8")

    with caplog.at_level(logging.ERROR, logger="nachamview.config"):
        opts = load_validation_options(path)

    assert opts == ValidationOptions()
    assert "Invalid JSON" in caplog.text


def test_configure_logging_writes_file(tmp_path):
    log_file = tmp_path / "nacham.log"
    logger = configure_logging(logging.DEBUG, log_file=log_file)
    try:
        logging.getLogger("nachamview.test").debug("hola")
        for handler in logger.handlers:
            handler.flush()

        assert logger.level == logging.DEBUG
        assert len(logger.handlers) == 2
        assert not logger.propagate
        assert "hola" in log_file.read_text(encoding="utf-8")
    finally:
        for handler in list(logger.handlers):
            handler.close()
            logger.removeHandler(handler)
        logger.propagate = True
        logger.setLevel(logging.NOTSET)
