"""Tests for schedule analysis."""

from datetime import date
from types import SimpleNamespace

from capacity_board.db.models import AvailabilityBlock, AvailabilityType, Developer, Ticket, TicketStatus
from capacity_board.integrations import summarizer

DEVS = [Developer(id="d1", name="Alice", role="Frontend Lead")]
TICKETS = [Ticket(id="A-1", key="A-1", title="Task", assignee_id="d1", status=TicketStatus.TODO,
                  start_date=date(2024, 3, 4), end_date=date(2024, 3, 6))]
BLOCKS = [AvailabilityBlock(id="b1", developer_id="d1", type=AvailabilityType.OOO,
                            start_date=date(2024, 3, 5), end_date=date(2024, 3, 5))]


class FakeClient:
    def __init__(self, content=None, error=None):
        self.calls = []
        self.content = content
        self.error = error
        self.chat = SimpleNamespace(completions=SimpleNamespace(create=self._create))

    def _create(self, **kwargs):
        self.calls.append(kwargs)
        if self.error:
            raise self.error
        message = SimpleNamespace(content=self.content)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


class TestPayload:
    def test_shape(self):
        payload = summarizer.build_payload(DEVS, TICKETS, BLOCKS)
        assert payload == {
            "developers": [{"name": "Alice", "role": "Frontend Lead"}],
            "tickets": [{"key": "A-1", "assignee": "d1", "status": "To Do",
                         "start": "2024-03-04", "end": "2024-03-06"}],
            "blocks": [{"developer": "d1", "type": "Out of Office",
                        "start": "2024-03-05", "end": "2024-03-05"}],
        }

    def test_prompt_embeds_json(self):
        prompt = summarizer.build_prompt(summarizer.build_payload(DEVS, TICKETS, BLOCKS))
        assert '"key": "A-1"' in prompt
        assert "Format the output as Markdown." in prompt


class TestAnalyze:
    def test_missing_key(self):
        assert summarizer.analyze_schedule(None, DEVS, TICKETS, BLOCKS) == summarizer.MISSING_KEY_TEXT

    def test_success(self, monkeypatch):
        client = FakeClient(content="  - Alice is overbooked\n")
        monkeypatch.setattr(summarizer, "get_client", lambda key: client)
        text = summarizer.analyze_schedule("k", DEVS, TICKETS, BLOCKS, model="m")
        assert text == "- Alice is overbooked"
        call = client.calls[0]
        assert call["model"] == "m"
        assert call["temperature"] == 0.3
        assert call["messages"][0] == {"role": "system", "content": summarizer.SYSTEM_PROMPT}

    def test_empty_response(self, monkeypatch):
        monkeypatch.setattr(summarizer, "get_client", lambda key: FakeClient(content=None))
        assert summarizer.analyze_schedule("k", DEVS, TICKETS, BLOCKS) == summarizer.EMPTY_TEXT

    def test_failure_recovered(self, monkeypatch):
        monkeypatch.setattr(summarizer, "get_client", lambda key: FakeClient(error=RuntimeError("quota")))
        assert summarizer.analyze_schedule("k", DEVS, TICKETS, BLOCKS) == summarizer.FAILED_TEXT
