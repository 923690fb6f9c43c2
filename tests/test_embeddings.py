import unittest
from unittest.mock import patch, MagicMock
import os
import sys

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from gridfinder_assistant.config import EMBEDDING_MODEL
from gridfinder_assistant.services.embeddings import generate_embedding


class TestEmbeddings(unittest.TestCase):

    def _mock_client(self, embedding):
        client = MagicMock()
        client.embeddings.create.return_value = MagicMock(data=[MagicMock(embedding=embedding)])
        return client

    def test_generate_embedding_with_explicit_client(self):
        mock_embedding = [0.1] * 1536
        client = self._mock_client(mock_embedding)

        result = generate_embedding("Spring Karting Classic", client=client)

        self.assertEqual(result, mock_embedding)
        client.embeddings.create.assert_called_once_with(
            model=EMBEDDING_MODEL, input="Spring Karting Classic"
        )

    @patch('gridfinder_assistant.services.embeddings.get_openai')
    def test_generate_embedding_uses_shared_client(self, mock_get_openai):
        mock_get_openai.return_value = self._mock_client([0.5, 0.5])

        result = generate_embedding("Test text")

        self.assertEqual(result, [0.5, 0.5])
        mock_get_openai.assert_called_once()

    def test_generate_embedding_is_not_cached(self):
        client = self._mock_client([1.0, 0.0])

        generate_embedding("same text", client=client)
        generate_embedding("same text", client=client)

        self.assertEqual(client.embeddings.create.call_count, 2)

    def test_generate_embedding_propagates_errors(self):
        client = MagicMock()
        client.embeddings.create.side_effect = RuntimeError("quota exceeded")

        with self.assertRaises(RuntimeError) as ctx:
            generate_embedding("Test text", client=client)
        self.assertEqual(str(ctx.exception), "quota exceeded")


if __name__ == '__main__':
    unittest.main()
