"""
Unit Tests for the Message Catalog

Tests for MessageCatalog lookups and fallbacks.
"""

from qml_toolkit.importer.messages import MessageCatalog


class TestMessageCatalog:
    """Tests for MessageCatalog."""

    def test_get_when_arguments_then_placeholders_filled(self):
        message = MessageCatalog("en").get("unknownquestiontype", a="HOT")
        assert message == "Question type HOT is not supported by QML import"

    def test_get_when_key_unknown_then_visible_marker(self):
        assert MessageCatalog().get("nosuchkey") == "[[nosuchkey]]"

    def test_get_when_argument_missing_then_template_returned(self):
        message = MessageCatalog().get("questionfailed", a="Q1")
        assert message == "Question {a} could not be imported: {b}"

    def test_get_when_argument_none_then_rendered_empty(self):
        assert MessageCatalog().get("documentinvalid", a=None) == "The QML document could not be read: "

    def test_init_when_language_unknown_then_falls_back_to_english(self):
        catalog = MessageCatalog("xx")
        assert catalog.language == "en"
        assert catalog.get("correct") == "Correct"

    def test_has_when_key_known_then_true(self):
        catalog = MessageCatalog()
        assert catalog.has("importsummary")
        assert not catalog.has("nosuchkey")
