import os
import sys
import threading
import unittest
from unittest.mock import patch, MagicMock

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from gridfinder_assistant.errors import ChatRequestError
from gridfinder_assistant.models import ChatMessage, KnowledgeItem
from gridfinder_assistant.services.chat import (
    APOLOGY,
    SYSTEM_INSTRUCTION,
    ChatService,
    answer,
    build_messages,
    get_default_service,
    format_context,
    parse_messages,
)


class TestFormatting(unittest.TestCase):

    def test_format_context_numbers_hits(self):
        hits = [
            KnowledgeItem(id="A", url="/events/A", text="id: A\ntitle: Spring Karting Classic"),
            KnowledgeItem(id="B", url=None, text="id: B\ntitle: Summer HPDE Weekend"),
        ]

        context = format_context(hits)

        self.assertEqual(
            context,
            "[#1] /events/A\nid: A\ntitle: Spring Karting Classic\n\n"
            "[#2] \nid: B\ntitle: Summer HPDE Weekend",
        )

    def test_format_context_empty(self):
        self.assertEqual(format_context([]), "(no relevant context found)")

    def test_build_messages_puts_context_before_history(self):
        history = [
            ChatMessage(role="user", content="Any karting?"),
            ChatMessage(role="bot", content="Yes, in Austin."),
            ChatMessage(role="user", content="When?"),
        ]

        payload = build_messages(history, "CTX")

        self.assertEqual(payload[0], {"role": "system", "content": SYSTEM_INSTRUCTION})
        self.assertEqual(payload[1], {"role": "user", "content": "Website context:\nCTX"})
        self.assertEqual(
            [m["role"] for m in payload[2:]], ["user", "assistant", "user"]
        )
        self.assertEqual(payload[-1]["content"], "When?")


class TestParseMessages(unittest.TestCase):

    def test_accepts_dicts_and_messages(self):
        messages = parse_messages([
            {"role": "user", "content": "hi"},
            ChatMessage(role="bot", content="hello"),
        ])
        self.assertEqual([m.role for m in messages], ["user", "bot"])

    def test_rejects_malformed_payloads(self):
        for payload in (None, "hi", [], [{"role": "system", "content": "x"}], [{"role": "user"}], ["hi"]):
            with self.subTest(payload=payload):
                with self.assertRaises(ChatRequestError):
                    parse_messages(payload)


class TestChatService(unittest.TestCase):

    def setUp(self):
        self.hits = [KnowledgeItem(id="A", url="/events/A", text="id: A\ntitle: Spring Karting Classic")]
        self.retriever = MagicMock()
        self.retriever.retrieve.return_value = self.hits
        self.client = MagicMock()
        completion = MagicMock()
        completion.choices = [MagicMock(message=MagicMock(content="  - **Spring Karting Classic**  "))]
        self.client.chat.completions.create.return_value = completion
        self.service = ChatService(self.retriever, client=self.client, model="test-model", top_k=6)

    def test_reply_uses_latest_message_as_query(self):
        result = self.service.reply([
            {"role": "user", "content": "Any events in Texas?"},
            {"role": "bot", "content": "Which kind?"},
            {"role": "user", "content": "karting Austin"},
        ])

        self.retriever.retrieve.assert_called_once_with("karting Austin", 6)
        self.assertEqual(result.reply, "- **Spring Karting Classic**")
        self.assertEqual(result.sources, ["A"])
        self.assertFalse(result.error)

    def test_reply_sends_context_and_history_to_model(self):
        self.service.reply([{"role": "user", "content": "karting Austin"}])

        kwargs = self.client.chat.completions.create.call_args.kwargs
        self.assertEqual(kwargs["model"], "test-model")
        messages = kwargs["messages"]
        self.assertIn("[#1] /events/A", messages[1]["content"])
        self.assertEqual(messages[-1], {"role": "user", "content": "karting Austin"})

    def test_retrieval_failure_becomes_apology(self):
        self.retriever.retrieve.side_effect = RuntimeError("quota exceeded")

        with self.assertLogs('gridfinder_assistant.services.chat', level='ERROR'):
            result = self.service.reply([{"role": "user", "content": "karting"}])

        self.assertTrue(result.error)
        self.assertEqual(result.reply, APOLOGY)
        self.client.chat.completions.create.assert_not_called()

    def test_model_failure_becomes_apology(self):
        self.client.chat.completions.create.side_effect = RuntimeError("model overloaded")

        with self.assertLogs('gridfinder_assistant.services.chat', level='ERROR'):
            result = self.service.reply([{"role": "user", "content": "karting"}])

        self.assertTrue(result.error)
        self.assertEqual(result.sources, [])

    def test_malformed_request_is_not_swallowed(self):
        with self.assertRaises(ChatRequestError):
            self.service.reply([])
        self.retriever.retrieve.assert_not_called()


class TestAnswer(unittest.TestCase):

    @patch('gridfinder_assistant.services.chat.get_default_service')
    def test_answer_delegates_to_default_service(self, mock_get_default_service):
        answer([{"role": "user", "content": "hi"}])
        mock_get_default_service.return_value.reply.assert_called_once_with(
            [{"role": "user", "content": "hi"}]
        )


class TestDefaultService(unittest.TestCase):

    @patch("gridfinder_assistant.services.chat._default_service", None)
    @patch("gridfinder_assistant.services.chat.get_default_store")
    def test_concurrent_callers_share_one_service(self, mock_get_default_store):
        barrier = threading.Barrier(8)
        services = []
        services_lock = threading.Lock()

        def worker():
            barrier.wait(timeout=5)
            service = get_default_service()
            with services_lock:
                services.append(service)

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join(timeout=5)

        self.assertEqual(len(services), 8)
        self.assertTrue(all(service is services[0] for service in services))
        mock_get_default_store.assert_called_once()


if __name__ == '__main__':
    unittest.main()
