import io

import pytest

from models.enums import LogCategory, LogLevel, MouseMode
from utils.logger import Logger, format_detail_value


@pytest.fixture
def output():
    return io.StringIO()


@pytest.fixture
def logger(output):
    return Logger(min_level=LogLevel.INFO, use_colors=False, stream=output)


class TestLogger:

    def test_message_with_details(self, logger, output):
        logger.for_category(LogCategory.PRESET).info("Preset stored", slot=3, zoom=1.0200001)

        lines = output.getvalue().splitlines()
        assert "PRESET" in lines[0]
        assert lines[0].endswith("✓ Preset stored")
        assert lines[1].strip() == "├─ slot: 3"
        assert lines[2].strip() == "└─ zoom: 1.02"

    def test_min_level_filters(self, logger, output):
        log = logger.for_category(LogCategory.CONTROLS)
        log.debug("hidden")
        log.warn("shown")

        assert "hidden" not in output.getvalue()
        assert "⚠ shown" in output.getvalue()

    def test_category_override(self, logger, output):
        logger.category_levels = {LogCategory.RENDER: LogLevel.DEBUG, LogCategory.EVENT: LogLevel.ERROR}

        logger.for_category(LogCategory.RENDER).debug("frame")
        logger.for_category(LogCategory.EVENT).info("quiet")
        logger.for_category(LogCategory.CONTROLS).debug("still hidden")

        text = output.getvalue()
        assert "frame" in text
        assert "quiet" not in text
        assert "still hidden" not in text
        assert logger.for_category(LogCategory.RENDER).is_enabled(LogLevel.DEBUG)

    def test_no_colors_means_no_escape_codes(self, logger, output):
        logger.for_category(LogCategory.SYSTEM).error("boom")
        assert "\033[" not in output.getvalue()

    def test_colors(self, output):
        colored = Logger(use_colors=True, stream=output)
        colored.for_category(LogCategory.SYSTEM).info("hello")
        assert "\033[" in output.getvalue()


class TestDetailFormatting:

    @pytest.mark.parametrize("value, expected", [
        (0.99995, "0.99995"),
        (1.0000000001, "1"),
        ((0.1, -0.25), "(0.1, -0.25)"),
        (MouseMode.PAN, "PAN"),
        (True, "True"),
        (7, "7"),
        ("text", "text"),
    ])
    def test_values(self, value, expected):
        assert format_detail_value(value) == expected
