"""Tests for the WebSocket engine adapters and message router."""

import pytest

from voicebridge.application.live.controller import PipelineController
from voicebridge.application.live.recognition import RecognitionStatus
from voicebridge.domain.protocols.capabilities import SynthesisVoice, Utterance
from voicebridge.presentation.ws.bridge import (
    Outbox,
    RemoteRecognitionEngine,
    RemoteSynthesisEngine,
    WebSocketView,
    parse_result_event,
    parse_voices,
)
from voicebridge.presentation.ws.router import LiveConnection, router


def drain(outbox: Outbox) -> list[dict]:
    messages = []
    while not outbox._queue.empty():
        messages.append(outbox._queue.get_nowait())
    return messages


class FakeSocket:
    def __init__(self):
        self.sent = []

    async def send_json(self, message):
        self.sent.append(message)


class TestOutbox:
    @pytest.mark.asyncio
    async def test_pump_writes_in_order_until_closed(self):
        outbox = Outbox()
        socket = FakeSocket()

        outbox.send("a", {"n": 1})
        outbox.send("b")
        outbox.close()
        outbox.send("dropped")
        await outbox.pump(socket)

        assert socket.sent == [
            {"type": "a", "payload": {"n": 1}},
            {"type": "b", "payload": {}},
        ]
        assert outbox.sent_count == 2
        assert outbox.closed


class TestParsing:
    def test_parse_result_event(self):
        event = parse_result_event(
            {
                "resultIndex": 1,
                "results": [
                    {"isFinal": True, "alternatives": [{"transcript": "hello", "confidence": 0.8}]},
                    {"isFinal": False, "alternatives": [{"transcript": " wor"}]},
                ],
            }
        )

        assert event.result_index == 1
        assert event.results[0].is_final
        assert event.results[0].alternatives[0].transcript == "hello"
        assert event.results[1].alternatives[0].confidence is None

    def test_parse_empty_result_event(self):
        event = parse_result_event({})

        assert event.results == ()
        assert event.result_index == 0

    def test_parse_voices(self):
        voices = parse_voices({"voices": [{"name": "Google Kannada", "lang": "kn-IN", "default": True}]})

        assert voices == [SynthesisVoice(name="Google Kannada", lang="kn-IN", default=True)]


class TestRemoteRecognitionEngine:
    def test_start_sends_configuration(self):
        outbox = Outbox()
        engine = RemoteRecognitionEngine(outbox)
        engine.lang = "kn-IN"
        engine.continuous = True
        engine.interim_results = True

        engine.start()

        assert drain(outbox) == [
            {
                "type": "recognition.start",
                "payload": {
                    "lang": "kn-IN",
                    "continuous": True,
                    "interimResults": True,
                    "maxAlternatives": 1,
                },
            }
        ]
        assert engine.running

    def test_double_start_raises(self):
        engine = RemoteRecognitionEngine(Outbox())
        engine.start()

        with pytest.raises(RuntimeError):
            engine.start()

    def test_end_allows_restart(self):
        ended = []
        engine = RemoteRecognitionEngine(Outbox())
        engine.on_end = lambda: ended.append(True)
        engine.start()

        engine.deliver_end()
        engine.start()

        assert ended == [True]

    def test_deliver_error(self):
        errors = []
        engine = RemoteRecognitionEngine(Outbox())
        engine.on_error = errors.append

        engine.deliver_error({"error": "no-speech"})

        assert errors[0].error == "no-speech"


class TestRemoteSynthesisEngine:
    def test_speak_and_end_round_trip(self):
        outbox = Outbox()
        engine = RemoteSynthesisEngine(outbox)
        ended = []
        utterance = Utterance(
            text="ನಮಸ್ಕಾರ",
            lang="kn-IN",
            voice=SynthesisVoice(name="Google Kannada", lang="kn-IN"),
            on_end=lambda: ended.append(True),
        )

        engine.cancel()
        engine.speak(utterance)
        messages = drain(outbox)
        engine.deliver_end({"id": messages[1]["payload"]["id"]})

        assert [m["type"] for m in messages] == ["synthesis.cancel", "synthesis.speak"]
        assert messages[1]["payload"]["voice"] == "Google Kannada"
        assert ended == [True]

    def test_unknown_end_id_ignored(self):
        engine = RemoteSynthesisEngine(Outbox())

        engine.deliver_end({"id": 42})

    def test_voices_notify(self):
        engine = RemoteSynthesisEngine(Outbox())
        changed = []
        engine.on_voices_changed = lambda: changed.append(True)

        engine.deliver_voices({"voices": [{"name": "v", "lang": "en-US"}]})

        assert changed == [True]
        assert engine.get_voices()[0].lang == "en-US"


def test_view_messages():
    outbox = Outbox()
    view = WebSocketView(outbox)

    view.set_status("Ready")
    view.set_listening(True)
    view.set_controls(listen_available=False, speak_available=True)

    assert drain(outbox) == [
        {"type": "view.status", "payload": {"text": "Ready", "isError": False}},
        {"type": "view.listening", "payload": {"listening": True}},
        {"type": "view.controls", "payload": {"listenAvailable": False, "speakAvailable": True}},
    ]


@pytest.fixture
def connection(translator, scheduler):
    outbox = Outbox()
    recognition = RemoteRecognitionEngine(outbox)
    controller = PipelineController(
        WebSocketView(outbox),
        translator,
        recognition,
        None,
        scheduler=scheduler,
    )
    controller.startup()
    drain(outbox)
    return LiveConnection(
        connection_id="test",
        outbox=outbox,
        controller=controller,
        recognition=recognition,
    )


class TestMessageRouter:
    @pytest.mark.asyncio
    async def test_ping(self, connection):
        await router.route(connection, {"type": "ping", "payload": {"n": 1}})

        assert drain(connection.outbox) == [{"type": "pong", "payload": {"n": 1}}]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("message", [{}, {"payload": {}}, ["ping"]])
    async def test_missing_type(self, connection, message):
        await router.route(connection, message)

        assert drain(connection.outbox)[0]["payload"]["code"] == "INVALID_MESSAGE"

    @pytest.mark.asyncio
    async def test_unknown_type(self, connection):
        await router.route(connection, {"type": "nope"})

        assert drain(connection.outbox)[0]["payload"]["code"] == "UNKNOWN_MESSAGE_TYPE"

    @pytest.mark.asyncio
    async def test_non_object_payload(self, connection):
        await router.route(connection, {"type": "ping", "payload": [1]})

        assert drain(connection.outbox)[0]["payload"]["code"] == "INVALID_MESSAGE"

    @pytest.mark.asyncio
    async def test_synthesis_message_without_engine(self, connection):
        await router.route(connection, {"type": "synthesis.voices", "payload": {"voices": []}})

        assert drain(connection.outbox)[0]["payload"]["code"] == "UNSUPPORTED"

    @pytest.mark.asyncio
    async def test_listen_start_and_transcript(self, connection):
        await router.route(connection, {"type": "listen.start"})
        await router.route(
            connection,
            {
                "type": "recognition.result",
                "payload": {
                    "resultIndex": 0,
                    "results": [{"isFinal": True, "alternatives": [{"transcript": "hello"}]}],
                },
            },
        )

        types = [m["type"] for m in drain(connection.outbox)]
        assert "recognition.start" in types
        assert "view.source_text" in types
        assert connection.controller.listening
        assert connection.received_count == 2

    @pytest.mark.asyncio
    async def test_configure(self, connection):
        await router.route(
            connection,
            {"type": "session.configure", "payload": {"targetLang": "ta", "voiceOutput": False}},
        )

        assert connection.controller.target_lang == "ta"
        assert connection.controller.voice_output is False

    @pytest.mark.asyncio
    async def test_client_restart_failure_does_not_loop(self, connection):
        await router.route(connection, {"type": "listen.start"})
        await router.route(connection, {"type": "recognition.end"})
        drain(connection.outbox)

        for _ in range(20):
            await router.route(
                connection,
                {"type": "recognition.error", "payload": {"error": "start-failed", "message": "busy"}},
            )
            await router.route(connection, {"type": "recognition.end"})

        messages = drain(connection.outbox)
        assert [m for m in messages if m["type"] == "recognition.start"] == []
        assert connection.controller.session.status is RecognitionStatus.ERRORED
        assert connection.controller.listening is False
        assert {"type": "view.listening", "payload": {"listening": False}} in messages
        statuses = [m["payload"]["text"] for m in messages if m["type"] == "view.status"]
        assert statuses[0] == "Error restarting recognition: busy"

    @pytest.mark.asyncio
    async def test_client_first_start_failure(self, connection):
        await router.route(connection, {"type": "listen.start"})
        await router.route(
            connection,
            {"type": "recognition.error", "payload": {"error": "start-failed", "message": "busy"}},
        )
        await router.route(connection, {"type": "recognition.end"})

        messages = drain(connection.outbox)
        assert len([m for m in messages if m["type"] == "recognition.start"]) == 1
        assert connection.controller.listening is False
        statuses = [m["payload"]["text"] for m in messages if m["type"] == "view.status"]
        assert "Could not start listening: busy" in statuses
