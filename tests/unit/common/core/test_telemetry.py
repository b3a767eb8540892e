import pytest

from common.core.otel_axiom_exporter import trace_span, log_span_event


class TestTraceSpan:
    """Span naming of the trace_span decorator."""

    async def test_async_method_span_includes_class(self, mock_start_span):
        class Probe:
            @trace_span
            async def check(self):
                return "ok"

        assert await Probe().check() == "ok"
        mock_start_span.assert_called_once_with("Probe.check")

    def test_sync_method_span(self, mock_start_span):
        class Probe:
            @trace_span
            def check(self, value):
                return value * 2

        assert Probe().check(21) == 42
        mock_start_span.assert_called_once_with("Probe.check")

    async def test_wraps_preserve_metadata(self):
        @trace_span
        async def reconcile_everything():
            """Docstring."""

        assert reconcile_everything.__name__ == "reconcile_everything"
        assert reconcile_everything.__doc__ == "Docstring."

    async def test_exceptions_propagate(self, mock_start_span, mock_span):
        class Probe:
            @trace_span
            async def fail(self):
                raise RuntimeError("boom")

        with pytest.raises(RuntimeError, match="boom"):
            await Probe().fail()

        mock_span.__exit__.assert_called_once()

    async def test_service_calls_are_traced(self, mock_start_span, billing_context):
        await billing_context.validity.verify("acct-1")

        span_names = [c.args[0] for c in mock_start_span.call_args_list]
        assert span_names[0] == "ValidityService.verify"
        assert "FreeAllowanceRepository.get_or_initialize" in span_names


class TestLogSpanEvent:
    def test_logs_without_active_span(self, caplog):
        with caplog.at_level("INFO"):
            log_span_event("reconciled", {"account_id": "abc"})

        assert "reconciled" in caplog.text
