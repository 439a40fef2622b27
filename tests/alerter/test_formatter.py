"""Tests for alert message formatter."""

import re
from datetime import datetime

import pytest

from telegram_alert_bot.alerter.formatter import (
    PROJECT_TAG_MAX_LENGTH,
    UNNAMED_PROJECT_TAG,
    derive_project_tag,
    escape_html,
    format_alert,
    format_timestamp,
    get_emoji,
)
from telegram_alert_bot.alerter.models import AlertLevel, AlertRequest

# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture
def fixed_time() -> datetime:
    """A fixed wall-clock timestamp."""
    return datetime(2024, 3, 5, 14, 7, 9)


# ============================================================================
# Project Tag Tests
# ============================================================================


class TestDeriveProjectTag:
    """Tests for derive_project_tag."""

    def test_empty_name_uses_fallback(self) -> None:
        """Empty name should fall back to unnamed_project."""
        assert derive_project_tag("") == UNNAMED_PROJECT_TAG

    def test_symbols_only_uses_fallback(self) -> None:
        """A name with no alphanumerics should fall back too."""
        assert derive_project_tag("  !!!  ---  ") == "unnamed_project"

    def test_leading_digit_gets_prefix(self) -> None:
        """Tags starting with a digit are prefixed."""
        assert derive_project_tag("123 Cool Project!!") == "project_123_cool_project"

    def test_runs_collapse_to_single_underscore(self) -> None:
        """Runs of separators collapse and edges are trimmed."""
        assert derive_project_tag("  Multi   Space--Name__ ") == "multi_space_name"

    def test_lowercases(self) -> None:
        """Tags are lowercase."""
        assert derive_project_tag("MyService") == "myservice"

    def test_non_ascii_replaced(self) -> None:
        """Non-ASCII letters are outside the tag alphabet."""
        assert derive_project_tag("Café Über") == "caf_ber"

    def test_truncates_to_max_length(self) -> None:
        """Long names are truncated to 32 characters."""
        tag = derive_project_tag("a" * 50)
        assert tag == "a" * PROJECT_TAG_MAX_LENGTH

    def test_truncation_keeps_dangling_underscore(self) -> None:
        """Truncation happens last, without re-trimming."""
        name = "a" * 31 + " b"
        assert derive_project_tag(name) == "a" * 31 + "_"

    def test_prefix_counts_toward_length(self) -> None:
        """The project_ prefix is added before truncation."""
        tag = derive_project_tag("1" * 40)
        assert tag == "project_" + "1" * 24
        assert len(tag) == 32

    @pytest.mark.parametrize(
        "name",
        [
            "Billing Service",
            "  42 Things  ",
            "payments/api v2",
            "ÆØÅ",
            "__init__",
            "x" * 100,
            "Ends-With-Digit 9",
        ],
    )
    def test_tag_properties(self, name: str) -> None:
        """Tags are deterministic, bounded and use a safe alphabet."""
        tag = derive_project_tag(name)
        assert tag == derive_project_tag(name)
        assert 0 < len(tag) <= PROJECT_TAG_MAX_LENGTH
        assert re.fullmatch(r"[a-z0-9_]+", tag)
        assert derive_project_tag(tag) == tag


# ============================================================================
# Emoji / Escaping Tests
# ============================================================================


class TestGetEmoji:
    """Tests for get_emoji."""

    def test_error(self) -> None:
        assert get_emoji(AlertLevel.ERROR) == "🚨"

    def test_warning(self) -> None:
        assert get_emoji(AlertLevel.WARNING) == "⚠️"

    def test_log(self) -> None:
        assert get_emoji(AlertLevel.LOG) == "ℹ️"

    def test_every_level_mapped(self) -> None:
        """Every level has a distinct emoji."""
        emojis = {get_emoji(level) for level in AlertLevel}
        assert len(emojis) == len(AlertLevel)


class TestEscapeHtml:
    """Tests for escape_html."""

    def test_escapes_all_special_characters(self) -> None:
        assert escape_html("<a & 'b'>") == "&lt;a &amp; &#39;b&#39;&gt;"

    def test_escapes_double_quotes(self) -> None:
        assert escape_html('say "hi"') == "say &quot;hi&quot;"

    def test_replaces_every_occurrence(self) -> None:
        assert escape_html("&&&") == "&amp;&amp;&amp;"

    def test_existing_entity_escaped_literally(self) -> None:
        """An existing entity is escaped as literal text."""
        assert escape_html("&amp;") == "&amp;amp;"

    def test_plain_text_unchanged(self) -> None:
        assert escape_html("all good 123") == "all good 123"


def test_format_timestamp_is_24_hour() -> None:
    """Timestamps use 24-hour YYYY-MM-DD HH:MM:SS."""
    assert format_timestamp(datetime(2024, 12, 31, 23, 5, 1)) == "2024-12-31 23:05:01"


# ============================================================================
# format_alert Tests
# ============================================================================


class TestFormatAlert:
    """Tests for format_alert."""

    def test_layout_without_metadata(self, fixed_time: datetime) -> None:
        """Message has tags, header and body separated by blank lines."""
        request = AlertRequest(level=AlertLevel.ERROR, message="Disk full")

        text = format_alert(request, project_tag="billing", timestamp=fixed_time)

        assert text == (
            "#error #billing\n\n"
            "<b>🚨 ERROR - 2024-03-05 14:07:09</b>\n\n"
            "<b>Message:</b>\n<pre>Disk full</pre>"
        )

    def test_empty_metadata_omitted(self, fixed_time: datetime) -> None:
        """An empty mapping omits the Metadata section."""
        request = AlertRequest(level=AlertLevel.LOG, message="hi", metadata={})

        text = format_alert(request, project_tag="p", timestamp=fixed_time)

        assert "Metadata:" not in text

    def test_metadata_rendered_as_indented_json(self, fixed_time: datetime) -> None:
        """Metadata is 2-space indented JSON."""
        request = AlertRequest(level=AlertLevel.WARNING, message="hi", metadata={"key": "v"})

        text = format_alert(request, project_tag="p", timestamp=fixed_time)

        assert text.endswith(
            "<b>Metadata:</b>\n<pre>{\n  &quot;key&quot;: &quot;v&quot;\n}</pre>"
        )
        assert text.startswith("#warning #p\n\n<b>⚠️ WARNING - ")

    def test_nested_metadata(self, fixed_time: datetime) -> None:
        """Nested objects, arrays and primitives serialize."""
        request = AlertRequest(
            level=AlertLevel.LOG,
            message="m",
            metadata={"items": [1, None, True], "inner": {"x": 1.5}},
        )

        text = format_alert(request, project_tag="p", timestamp=fixed_time)

        assert '  &quot;items&quot;: [\n    1,\n    null,\n    true\n  ],' in text
        assert '&quot;inner&quot;: {\n    &quot;x&quot;: 1.5\n  }' in text

    def test_message_is_escaped(self, fixed_time: datetime) -> None:
        """Message text cannot inject markup."""
        request = AlertRequest(level=AlertLevel.ERROR, message="<b>boom</b> & 'x'")

        text = format_alert(request, project_tag="p", timestamp=fixed_time)

        assert "<pre>&lt;b&gt;boom&lt;/b&gt; &amp; &#39;x&#39;</pre>" in text

    def test_metadata_values_are_escaped(self, fixed_time: datetime) -> None:
        """Markup inside metadata values is escaped."""
        request = AlertRequest(level=AlertLevel.ERROR, message="m", metadata={"html": "<i>"})

        text = format_alert(request, project_tag="p", timestamp=fixed_time)

        assert "&lt;i&gt;" in text
        assert "<i>" not in text

    def test_non_ascii_metadata_kept(self, fixed_time: datetime) -> None:
        """Non-ASCII metadata is not \\u-escaped."""
        request = AlertRequest(level=AlertLevel.LOG, message="m", metadata={"city": "Zürich"})

        text = format_alert(request, project_tag="p", timestamp=fixed_time)

        assert "Zürich" in text

    def test_unserializable_metadata_raises(self, fixed_time: datetime) -> None:
        """Serialization errors propagate to the caller."""
        request = AlertRequest(level=AlertLevel.LOG, message="m", metadata={"obj": object()})

        with pytest.raises(TypeError):
            format_alert(request, project_tag="p", timestamp=fixed_time)
