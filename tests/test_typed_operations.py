from __future__ import annotations

import unittest
from typing import Any
from unittest.mock import patch

from tgbot_client import (
    BotClient,
    BotSettings,
    Chat,
    Dice,
    ForwardMessageRequest,
    GetUpdatesRequest,
    Location,
    Message,
    MessageEntity,
    Poll,
    PollOption,
    ReplyParameters,
    SendDiceRequest,
    SendLocationRequest,
    SendMessageRequest,
    SendPollRequest,
    Update,
    User,
)

BOT_TOKEN = "test-token"
SENT_AT = 1700000000
BOT_USER = {"id": 99, "is_bot": True, "first_name": "EchoBot", "username": "echo_bot"}


class _FakeResponse:
    def __init__(self, status_code: int, payload: object) -> None:
        self.status_code = status_code
        self._payload = payload

    def json(self) -> object:
        return self._payload


class _EchoRemote:
    """Answers each method by reflecting the request body back as the remote would."""

    def __init__(self) -> None:
        self.requests: list[tuple[str, Any]] = []
        self._next_message_id = 500

    def _message(self, chat_id: int, **fields: Any) -> dict[str, Any]:
        self._next_message_id += 1
        payload = {
            "message_id": self._next_message_id,
            "date": SENT_AT,
            "chat": {"id": chat_id, "type": "private"},
            "from": BOT_USER,
        }
        payload.update(fields)
        return payload

    def __call__(self, url: str, **kwargs: Any) -> _FakeResponse:
        method = url.rsplit("/", 1)[-1]
        body = kwargs.get("json")
        self.requests.append((method, body))
        handler = getattr(self, f"_handle_{method}")
        return _FakeResponse(200, {"ok": True, "result": handler(body)})

    def _handle_getMe(self, body: Any) -> Any:
        return BOT_USER

    def _handle_sendMessage(self, body: Any) -> Any:
        fields: dict[str, Any] = {"text": body["text"]}
        if "entities" in body:
            fields["entities"] = body["entities"]
        return self._message(body["chat_id"], **fields)

    def _handle_answerCallbackQuery(self, body: Any) -> Any:
        return True

    def _handle_forwardMessage(self, body: Any) -> Any:
        return self._message(body["chat_id"], text=f"forwarded {body['message_id']} from {body['from_chat_id']}")

    def _handle_sendLocation(self, body: Any) -> Any:
        location = {key: body[key] for key in ("latitude", "longitude", "horizontal_accuracy", "live_period") if key in body}
        return self._message(body["chat_id"], location=location)

    def _handle_sendPoll(self, body: Any) -> Any:
        poll = {
            "id": "poll-1",
            "question": body["question"],
            "options": [{"text": text, "voter_count": 0} for text in body["options"]],
            "total_voter_count": 0,
            "is_closed": False,
            "is_anonymous": body.get("is_anonymous", True),
            "type": body.get("type", "regular"),
            "allows_multiple_answers": body.get("allows_multiple_answers", False),
        }
        return self._message(body["chat_id"], poll=poll)

    def _handle_sendDice(self, body: Any) -> Any:
        return self._message(body["chat_id"], dice={"emoji": body.get("emoji", "🎲"), "value": 4})

    def _handle_getUpdates(self, body: Any) -> Any:
        offset = body["offset"]
        return [
            {"update_id": offset, "message": self._message(7, text="first")},
            {"update_id": offset + 1, "edited_message": self._message(7, text="edited", edit_date=SENT_AT + 5)},
        ]


BOT = User(id=99, is_bot=True, first_name="EchoBot", username="echo_bot")


def _chat(chat_id: int) -> Chat:
    return Chat(id=chat_id, type="private")


class TypedOperationRoundTripTests(unittest.TestCase):
    def setUp(self) -> None:
        log_patcher = patch("tgbot_client.event_logging.write_log_line")
        log_patcher.start()
        self.addCleanup(log_patcher.stop)
        self.remote = _EchoRemote()
        self.client = BotClient(BotSettings(bot_token=BOT_TOKEN), request_post=self.remote)

    def test_get_me(self) -> None:
        self.assertEqual(self.client.get_me(), BOT)
        self.assertEqual(self.remote.requests, [("getMe", None)])

    def test_send_message(self) -> None:
        entity = MessageEntity(type="bold", offset=0, length=5)
        request = SendMessageRequest(
            chat_id=42,
            text="hello world",
            entities=(entity,),
            reply_parameters=ReplyParameters(message_id=10),
        )

        message = self.client.send_message(request)

        self.assertEqual(
            message,
            Message(
                message_id=501,
                date=SENT_AT,
                chat=_chat(42),
                from_user=BOT,
                text="hello world",
                entities=(entity,),
            ),
        )
        method, body = self.remote.requests[0]
        self.assertEqual(method, "sendMessage")
        self.assertEqual(
            body,
            {
                "chat_id": 42,
                "text": "hello world",
                "entities": [{"type": "bold", "offset": 0, "length": 5}],
                "reply_parameters": {"message_id": 10},
            },
        )

    def test_answer_callback_query(self) -> None:
        self.assertTrue(self.client.answer_callback_query("cbq-1", "done"))
        self.assertEqual(
            self.remote.requests,
            [("answerCallbackQuery", {"callback_query_id": "cbq-1", "text": "done"})],
        )

    def test_forward_message(self) -> None:
        message = self.client.forward_message(
            ForwardMessageRequest(chat_id=42, from_chat_id=-1001, message_id=7)
        )
        self.assertEqual(
            message,
            Message(
                message_id=501,
                date=SENT_AT,
                chat=_chat(42),
                from_user=BOT,
                text="forwarded 7 from -1001",
            ),
        )

    def test_send_location(self) -> None:
        message = self.client.send_location(
            SendLocationRequest(chat_id=42, latitude=37.5665, longitude=126.978, live_period=60)
        )
        self.assertEqual(
            message.location,
            Location(latitude=37.5665, longitude=126.978, live_period=60),
        )
        self.assertEqual(self.remote.requests[0][1]["latitude"], 37.5665)

    def test_send_poll(self) -> None:
        message = self.client.send_poll(
            SendPollRequest(
                chat_id=42,
                question="Lunch?",
                options=("noodles", "rice"),
                is_anonymous=False,
            )
        )
        self.assertEqual(
            message.poll,
            Poll(
                id="poll-1",
                question="Lunch?",
                options=(PollOption(text="noodles"), PollOption(text="rice")),
                is_anonymous=False,
            ),
        )
        self.assertEqual(self.remote.requests[0][1]["options"], ["noodles", "rice"])

    def test_send_dice(self) -> None:
        message = self.client.send_dice(SendDiceRequest(chat_id=42, emoji="🎯"))
        self.assertEqual(message.dice, Dice(emoji="🎯", value=4))
        self.assertEqual(message.chat, _chat(42))

    def test_get_updates(self) -> None:
        updates = self.client.get_updates(GetUpdatesRequest(offset=11, limit=100, timeout=0))

        self.assertEqual([update.update_id for update in updates], [11, 12])
        self.assertIsInstance(updates[0], Update)
        self.assertEqual(updates[0].kind, "message")
        self.assertEqual(updates[1].kind, "edited_message")
        assert updates[1].message is not None
        self.assertEqual(updates[1].message.edit_date, SENT_AT + 5)
        self.assertEqual(
            self.remote.requests[0],
            ("getUpdates", {"offset": 11, "limit": 100, "timeout": 0}),
        )


if __name__ == "__main__":
    unittest.main()
