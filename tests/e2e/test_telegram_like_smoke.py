import pytest

from pymaster.models import Topic
from pymaster.results import ResultsClient
from pymaster.session import Phase
from tests.telegram_harness.harness import BotHarness

USER = 111


class _RecordingResults(ResultsClient):
    def __init__(self) -> None:
        super().__init__("https://script.google.com/macros/s/test/exec")
        self.bodies: list[dict] = []

    async def _post(self, body):
        self.bodies.append(body)


@pytest.mark.asyncio
async def test_practice_session_end_to_end():
    results = _RecordingResults()
    harness = BotHarness.create(results_client=results, settings_overrides={"questions_per_session": 2})
    try:
        await harness.send_text(user_id=USER, text="/start")
        assert "student code" in harness.last_text(USER)

        await harness.send_text(user_id=USER, text="ab")
        assert "at least 3" in harness.last_text(USER)

        await harness.send_text(user_id=USER, text="HS001")
        assert "topic:combined" in harness.find_callback_data(USER)

        await harness.click(user_id=USER, data=f"topic:{Topic.COMBINED.value}")
        session = harness.store.get(USER)
        assert session.phase is Phase.PLAYING
        assert session.question.id.startswith("fallback#combined#0#")
        assert "Question 1/2" in harness.last_text(USER)

        await harness.send_text(user_id=USER, text="if 5 > 3:")
        await harness.send_text(user_id=USER, text='print("OK")')
        assert session.draft == 'if 5 > 3:\n    print("OK")'
        assert 'print("OK")' in harness.last_text(USER)

        await harness.click(user_id=USER, data="run")
        text = harness.last_text(USER)
        assert "Correct" in text
        assert "OK" in text
        assert "next" in harness.find_callback_data(USER)

        await harness.click(user_id=USER, data="next")
        assert session.state.score == 1
        assert "Question 2/2" in harness.last_text(USER)

        await harness.send_text(user_id=USER, text="pri")
        assert harness.find_callback_data(USER, predicate=lambda v: v.startswith("sg:")) == ["sg:print"]
        await harness.click(user_id=USER, data="sg:print")
        assert session.draft == "print"

        await harness.click(user_id=USER, data="skip")
        assert session.phase is Phase.FINISHED
        assert results.bodies == [
            {
                "timestamp": results.bodies[0]["timestamp"],
                "studentCode": "HS001",
                "score": 1,
                "totalQuestionsAnswered": 2,
            }
        ]
        assert "restart" in harness.find_callback_data(USER)

        await harness.click(user_id=USER, data="restart")
        assert session.phase is Phase.TOPIC_SELECTION
        assert session.state.student_code == "HS001"
    finally:
        await harness.close()


@pytest.mark.asyncio
async def test_finish_without_webhook_sends_csv():
    harness = BotHarness.create()
    try:
        await harness.send_text(user_id=USER, text="/start")
        await harness.send_text(user_id=USER, text="HS002")
        await harness.click(user_id=USER, data="topic:loop")
        await harness.click(user_id=USER, data="run")
        assert "not entered any code" in harness.last_text(USER)

        await harness.click(user_id=USER, data="finish")
        assert "not configured" in harness.last_text(USER)
        docs = harness.recording.documents_by_chat[USER]
        assert docs[0]["filename"] == "ket_qua_HS002.csv"
        assert b"HS002,0,0" in docs[0]["data"]
    finally:
        await harness.close()


@pytest.mark.asyncio
async def test_skip_from_old_editor_keeps_solved_point():
    harness = BotHarness.create()
    try:
        await harness.send_text(user_id=USER, text="/start")
        await harness.send_text(user_id=USER, text="HS003")
        await harness.click(user_id=USER, data="topic:combined")
        await harness.send_text(user_id=USER, text="if 5 > 3:")
        await harness.send_text(user_id=USER, text='print("OK")')
        editor_message = harness.last_bot_message(USER)

        await harness.click(user_id=USER, data="run")
        assert harness.find_callback_data(USER) == ["next", "finish"]

        await harness.click(user_id=USER, data="skip", message=editor_message)
        session = harness.store.get(USER)
        assert session.state.history == []
        assert session.result is not None and session.result.correct
        assert harness.recording.callback_answers[-1]["text"] == "You already solved this one, press Next."

        await harness.click(user_id=USER, data="next")
        assert session.state.score == 1
        assert not session.state.history[0].skipped
    finally:
        await harness.close()
