import logging

from partflow.core.logging import ContextFormatter


def _record(**extra):
    record = logging.LogRecord("partflow.test", logging.INFO, __file__, 1, "Part created", (), None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_context_formatter_appends_extra_fields_sorted():
    formatter = ContextFormatter("%(levelname)s | %(message)s")

    line = formatter.format(_record(part_id="p-1", delta=-3))

    assert line == "INFO | Part created | delta=-3 part_id='p-1'"


def test_context_formatter_without_extra():
    formatter = ContextFormatter("%(message)s")
    assert formatter.format(_record()) == "Part created"
