"""
Tests for environment settings and logging helpers.
"""

import json
import logging
import os

import pytest
from surveycore.config import DEFAULT_SETTINGS, Settings
from surveycore.logging import (
    JsonFormatter,
    SurveyIdFilter,
    clear_survey_id,
    get_logger,
    set_survey_id,
    setup_logging,
)


class TestSettings:

    def test_defaults(self, monkeypatch):
        for key in [k for k in os.environ if k.startswith("SURVEYCORE_")]:
            monkeypatch.delenv(key, raising=False)
        assert Settings.from_env() == DEFAULT_SETTINGS

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("SURVEYCORE_LOGIC_ENGINE", "logicEngineV3")
        monkeypatch.setenv("SURVEYCORE_WEIGHT_MIN_QUESTIONS", "4")
        monkeypatch.setenv("SURVEYCORE_WEIGHT_VARIANCE_RATIO", "2.5")
        monkeypatch.setenv("SURVEYCORE_LOG_JSON", "yes")
        settings = Settings.from_env()
        assert settings.default_logic_engine == "logicEngineV3"
        assert settings.min_questions_for_weight_check == 4
        assert settings.weight_variance_ratio == 2.5
        assert settings.log_json is True

    def test_bad_numbers_fall_back(self, monkeypatch):
        monkeypatch.setenv("SURVEYCORE_WEIGHT_MIN_QUESTIONS", "three")
        monkeypatch.setenv("SURVEYCORE_WEIGHT_DOMINANCE_PERCENT", "")
        settings = Settings.from_env()
        assert settings.min_questions_for_weight_check == 3
        assert settings.weight_dominance_percent == 50.0


def make_record(msg="Validated survey", **extra):
    record = logging.LogRecord("surveycore.test", logging.INFO, __file__, 1, msg, None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


@pytest.fixture
def survey_context():
    set_survey_id("engagement-pulse")
    yield
    clear_survey_id()


def test_survey_id_filter(survey_context):
    record = make_record()
    assert SurveyIdFilter().filter(record) is True
    assert record.survey_id == "engagement-pulse"


def test_survey_id_filter_without_context():
    record = make_record()
    SurveyIdFilter().filter(record)
    assert record.survey_id is None


def test_json_formatter(survey_context):
    record = make_record(issue_count=2, band=object())
    SurveyIdFilter().filter(record)
    payload = json.loads(JsonFormatter().format(record))

    assert payload["level"] == "INFO"
    assert payload["logger"] == "surveycore.test"
    assert payload["msg"] == "Validated survey"
    assert payload["survey_id"] == "engagement-pulse"
    assert payload["issue_count"] == 2
    assert isinstance(payload["band"], str)


def test_setup_logging():
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    try:
        setup_logging("debug", json_logs=True)
        assert root.level == logging.DEBUG
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0].formatter, JsonFormatter)
    finally:
        root.handlers[:] = saved_handlers
        root.setLevel(saved_level)


def test_get_logger():
    assert get_logger("surveycore.scoring") is logging.getLogger("surveycore.scoring")
