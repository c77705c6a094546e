"""Tests for stream-scoped logging."""

import logging

from contextual_encoding.shared.logging import CorrelationLogger, get_logger, new_stream_id


class TestCorrelationLogger:
    """Tests for CorrelationLogger."""

    def test_component_defaults_to_module_name(self):
        """Test the default component."""
        logger = get_logger("contextual_encoding.writer.media_writer")
        assert logger.component == "media_writer"
        assert logger.correlation_id is None

    def test_extra_is_merged(self, caplog):
        """Test that correlation fields reach the record."""
        logger = get_logger("tests.correlation", "stream-1", "writer")
        with caplog.at_level(logging.DEBUG, logger="tests.correlation"):
            logger.debug("Closed text region", extra={"encoder": "text-in-javascript"})

        record = caplog.records[-1]
        assert record.getMessage() == "Closed text region"
        assert record.component == "writer"
        assert record.correlation_id == "stream-1"
        assert record.encoder == "text-in-javascript"

    def test_for_stream(self, caplog):
        """Test binding a module logger to a stream."""
        module_logger = get_logger("tests.stream", None, "writer")
        stream_logger = module_logger.for_stream("abc12345")
        assert stream_logger is not module_logger
        assert stream_logger.component == "writer"
        assert stream_logger.for_stream("abc12345") is stream_logger
        assert module_logger.correlation_id is None

        with caplog.at_level(logging.WARNING, logger="tests.stream"):
            stream_logger.warning("Rejected character")
        assert caplog.records[-1].correlation_id == "abc12345"

    def test_error_attaches_exception(self, caplog):
        """Test that errors logged while handling carry the traceback."""
        logger = CorrelationLogger("tests.error", component="cli")
        with caplog.at_level(logging.ERROR, logger="tests.error"):
            try:
                raise ValueError("boom")
            except ValueError:
                logger.error("Encoding failed")

        record = caplog.records[-1]
        assert record.levelname == "ERROR"
        assert record.exc_info[0] is ValueError


class TestNewStreamId:
    """Tests for new_stream_id."""

    def test_short_and_distinct(self):
        """Test id length and uniqueness."""
        ids = {new_stream_id() for _ in range(100)}
        assert len(ids) == 100
        assert all(len(stream_id) == 8 for stream_id in ids)
