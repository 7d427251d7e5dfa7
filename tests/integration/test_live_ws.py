"""End-to-end tests for the /ws/live pipeline socket."""


def receive_until(ws, predicate, limit=20):
    """Collect messages up to and including the first one matching `predicate`."""
    seen = []
    for _ in range(limit):
        message = ws.receive_json()
        seen.append(message)
        if predicate(message):
            return seen
    raise AssertionError(f"expected message not received: {seen}")


def startup_messages(ws):
    return [ws.receive_json() for _ in range(3)]


def test_startup_announces_capabilities(client):
    with client.websocket_connect("/ws/live") as ws:
        messages = startup_messages(ws)

    assert messages == [
        {"type": "view.controls", "payload": {"listenAvailable": True, "speakAvailable": True}},
        {"type": "view.listening", "payload": {"listening": False}},
        {"type": "view.status", "payload": {"text": "Ready", "isError": False}},
    ]


def test_missing_recognition_is_degraded(client):
    with client.websocket_connect("/ws/live?recognition=0") as ws:
        controls, _, status = startup_messages(ws)

    assert controls["payload"]["listenAvailable"] is False
    assert status["payload"] == {
        "text": "SpeechRecognition not supported on this host",
        "isError": True,
    }


def test_ping(client):
    with client.websocket_connect("/ws/live") as ws:
        startup_messages(ws)
        ws.send_json({"type": "ping", "payload": {"seq": 7}})

        assert ws.receive_json() == {"type": "pong", "payload": {"seq": 7}}


def test_invalid_json(client):
    with client.websocket_connect("/ws/live") as ws:
        startup_messages(ws)
        ws.send_text("not json")

        message = ws.receive_json()

    assert message["type"] == "error"
    assert message["payload"]["code"] == "INVALID_JSON"


def test_listen_start_commands_client_recognition(client):
    with client.websocket_connect("/ws/live") as ws:
        startup_messages(ws)
        ws.send_json({"type": "session.configure", "payload": {"sourceLang": "kn"}})
        ws.send_json({"type": "listen.start"})

        start, listening, status = [ws.receive_json() for _ in range(3)]

    assert start["type"] == "recognition.start"
    assert start["payload"]["lang"] == "kn-IN"
    assert start["payload"]["continuous"] is True
    assert start["payload"]["interimResults"] is True
    assert listening["payload"] == {"listening": True}
    assert status["payload"]["text"] == "Listening..."


def test_manual_translate_round_trip(client, provider):
    with client.websocket_connect("/ws/live?synthesis=0") as ws:
        startup_messages(ws)
        ws.send_json({"type": "session.configure", "payload": {"targetLang": "ta"}})
        ws.send_json({"type": "translate", "payload": {"text": "hello"}})

        messages = receive_until(
            ws, lambda m: m["type"] == "view.status" and m["payload"]["text"] == "Translated."
        )

    translated = [m for m in messages if m["type"] == "view.translated_text"]
    assert translated[-1]["payload"]["text"] == "ನಮಸ್ಕಾರ"
    assert provider.calls == [("hello", "en", "ta")]


def test_manual_translate_blank_text(client, provider):
    with client.websocket_connect("/ws/live") as ws:
        startup_messages(ws)
        ws.send_json({"type": "translate", "payload": {"text": "   "}})

        message = receive_until(ws, lambda m: m["type"] == "view.status")[-1]

    assert message["payload"] == {"text": "Please enter text or use live speech.", "isError": True}
    assert provider.calls == []
