import unittest

from ette.core.format_config import CryptoAlgorithm
from ette.core.session_state import EditorState, ResizeEvent
from ette.editor.syntax import C_PROFILE


class TestEditorState(unittest.TestCase):
    def setUp(self):
        self.state = EditorState(status_message_seconds=5)

    def test_password_is_masked_and_recoverable(self):
        self.state.set_password("test")
        self.assertTrue(self.state.has_password())
        self.assertEqual(self.state.get_password_bytes(), bytearray(b"test"))
        self.assertEqual(len(self.state.cached_password), 4)

        copy = self.state.get_password_bytes()
        copy[:] = bytes(len(copy))
        self.assertEqual(self.state.get_password_bytes(), bytearray(b"test"))

    def test_clear_password_zeroes_buffer(self):
        self.state.set_password(b"secret")
        buffer = self.state.cached_password
        self.state.clear_password()

        self.assertEqual(buffer, bytearray(6))
        self.assertIsNone(self.state.cached_password)
        self.assertIsNone(self.state.get_password_bytes())
        self.assertFalse(self.state.has_password())

    def test_status_message_expires(self):
        self.state.set_status_message("%d bytes written on disk", 12)
        start = self.state.status_message_time

        self.assertEqual(self.state.current_status_message(now=start + 1), "12 bytes written on disk")
        self.assertEqual(self.state.current_status_message(now=start + 5), "")

    def test_status_message_without_args_is_not_formatted(self):
        self.state.set_status_message("100% done")
        self.assertEqual(self.state.status_message, "100% done")

    def test_no_status_message(self):
        self.assertEqual(self.state.current_status_message(), "")

    def test_resize_events_are_queued(self):
        self.state.post_resize(24, 80)
        self.state.post_resize(40, 120)

        self.assertEqual(self.state.drain_events(), [ResizeEvent(24, 80), ResizeEvent(40, 120)])
        self.assertEqual(self.state.drain_events(), [])

    def test_encryption_flag_follows_algorithm(self):
        self.assertFalse(self.state.is_encrypted)
        self.state.crypto_algorithm = CryptoAlgorithm.AES256_CBC
        self.assertTrue(self.state.is_encrypted)

    def test_reset_document_keeps_syntax(self):
        self.state.document.set_syntax(C_PROFILE)
        self.state.document.insert_char(0, 0, "x")
        self.assertEqual(self.state.dirty, 2)

        self.state.reset_document()
        self.assertEqual(len(self.state.document), 0)
        self.assertIs(self.state.document.syntax, C_PROFILE)
        self.assertEqual(self.state.dirty, 0)


if __name__ == "__main__":
    unittest.main()
