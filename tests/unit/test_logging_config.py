import logging

import pytest

from comp_outlook.logging_config import (
    ANALYTICS_LOGGER,
    ENRICHMENT_LOGGER,
    PROJECTION_LOGGER,
    reset_logging,
    setup_logging,
)


@pytest.fixture
def log_dir(tmp_path):
    yield tmp_path / "logs"
    reset_logging()


def _flush():
    for name in (None, PROJECTION_LOGGER, ANALYTICS_LOGGER):
        for handler in logging.getLogger(name).handlers:
            handler.flush()


def test_setup_creates_log_files(log_dir):
    setup_logging(log_dir)
    assert (log_dir / "combined.log").exists()
    assert (log_dir / "warnings_errors.log").exists()
    assert (log_dir / "projection_events.log").exists()
    assert (log_dir / "analytics_events.log").exists()
    assert not (log_dir / "debug_detail.log").exists()


def test_debug_mode_adds_debug_file(log_dir):
    setup_logging(log_dir, debug=True)
    logging.getLogger("comp_outlook.projections.timeline").debug("timeline detail")
    _flush()
    assert "timeline detail" in (log_dir / "debug_detail.log").read_text(encoding="utf-8")


def test_enrichment_warnings_are_routed(log_dir):
    setup_logging(log_dir)
    logging.getLogger(ENRICHMENT_LOGGER).warning("fallback: rate limited")
    logging.getLogger(ANALYTICS_LOGGER + ".report").info("analytics computed")
    _flush()

    assert "fallback: rate limited" in (log_dir / "warnings_errors.log").read_text(encoding="utf-8")
    assert "fallback: rate limited" in (log_dir / "projection_events.log").read_text(encoding="utf-8")
    assert "analytics computed" in (log_dir / "analytics_events.log").read_text(encoding="utf-8")
    assert "analytics computed" not in (log_dir / "warnings_errors.log").read_text(encoding="utf-8")


def test_setup_is_idempotent(log_dir):
    setup_logging(log_dir)
    count = len(logging.getLogger().handlers)
    setup_logging(log_dir)
    assert len(logging.getLogger().handlers) == count
