"""Unit tests for model response parsing."""
import json

from transcript_digest.models import ContentType, ItemCategory, ReminderUrgency, TaskPriority
from transcript_digest.summarization.response_parser import ResponseParser

PAYLOAD = {
    "summary": "Team agreed on the launch date.",
    "contentType": "Meeting",
    "tasks": [
        {"text": "Draft release notes", "priority": "High", "timeReference": "Friday", "confidence": 0.9}
    ],
    "reminders": [{"text": "Book the venue", "urgency": "this week"}],
    "titles": [{"text": "Launch Planning", "confidence": 0.7}],
}


def test_parses_plain_json():
    analysis = ResponseParser().parse(json.dumps(PAYLOAD))

    assert analysis.summary == "Team agreed on the launch date."
    assert analysis.content_type == ContentType.MEETING
    task = analysis.tasks[0]
    assert task.priority == TaskPriority.HIGH
    assert task.time_reference == "Friday"
    assert task.category == ItemCategory.TASK
    assert analysis.reminders[0].urgency == ReminderUrgency.THIS_WEEK
    assert analysis.titles[0].confidence == 0.7


def test_extracts_json_from_code_fence():
    raw = "Here you go:\n```json\n" + json.dumps(PAYLOAD) + "\n```\nAnything else?"

    analysis = ResponseParser().parse(raw)

    assert analysis.summary == PAYLOAD["summary"]
    assert len(analysis.tasks) == 1


def test_extracts_json_after_echoed_transcript():
    raw = (
        "<transcript>\n{\"summary\": \"echoed input\"}\n</transcript>\n"
        "Result: " + json.dumps({"summary": "real answer", "titles": [{"text": "A {braced} title"}]})
    )

    analysis = ResponseParser().parse(raw)

    assert analysis.summary == "real answer"
    assert analysis.titles[0].text == "A {braced} title"


def test_unknown_content_type_falls_back_to_general():
    analysis = ResponseParser().parse(json.dumps({"summary": "x", "contentType": "Podcast"}))

    assert analysis.content_type == ContentType.GENERAL


def test_plain_text_becomes_summary():
    analysis = ResponseParser().parse("  Just a prose summary without JSON.  ")

    assert analysis.summary == "Just a prose summary without JSON."
    assert analysis.tasks == []
    assert analysis.content_type == ContentType.GENERAL


def test_empty_response_returns_none():
    assert ResponseParser().parse("") is None
    assert ResponseParser().parse("   ") is None


def test_invalid_item_values_do_not_lose_the_summary():
    raw = json.dumps(
        {
            "summary": "Team agreed to ship on Friday.",
            "contentType": "Meeting",
            "tasks": [{"text": "ship release", "priority": "urgent"}],
        }
    )

    analysis = ResponseParser().parse(raw)

    assert analysis.summary == "Team agreed to ship on Friday."
    assert analysis.tasks[0].priority == TaskPriority.MEDIUM


def test_invalid_fields_are_dropped_and_valid_items_kept():
    raw = json.dumps(
        {
            "summary": "Notes about the garden.",
            "contentType": "Personal Journal",
            "tasks": "none",
            "titles": [{"text": "Garden"}, {"text": 5}, {"confidence": 0.4}],
        }
    )

    analysis = ResponseParser().parse(raw)

    assert analysis.summary == "Notes about the garden."
    assert analysis.content_type == ContentType.PERSONAL_JOURNAL
    assert analysis.tasks == []
    assert [t.text for t in analysis.titles] == ["Garden"]


def test_nested_item_object_is_never_taken_as_the_analysis():
    raw = 'Result: {"tasks": [{"text": "ship release"}]}'

    analysis = ResponseParser().parse(raw)

    assert analysis.summary == raw
    assert analysis.tasks == []
