import unittest

from vaultpreview.services.error_normalizer import DEFAULT_ERROR_MESSAGE, NormalizedError, normalize_error


class _Sink:
    def __init__(self):
        self.calls = []

    def __call__(self, field, message):
        self.calls.append((field, message))


class TestErrorNormalizerUnit(unittest.TestCase):
    def test_exception_uses_its_text(self):
        out = normalize_error(RuntimeError("boom"))
        self.assertEqual(out.message, "boom")
        self.assertFalse(out.has_field_errors)

    def test_exception_without_text_falls_back(self):
        self.assertEqual(normalize_error(ValueError()).message, DEFAULT_ERROR_MESSAGE)

    def test_non_mapping_values_fall_back(self):
        for value in (None, "oops", 42, ["a"], b"x"):
            with self.subTest(value=value):
                out = normalize_error(value)
                self.assertEqual(out.message, DEFAULT_ERROR_MESSAGE)
                self.assertFalse(out.has_field_errors)

    def test_detail_string(self):
        out = normalize_error({"detail": "Not found"})
        self.assertEqual(out.message, "Not found")
        self.assertFalse(out.has_field_errors)

    def test_detail_list_uses_first_element(self):
        self.assertEqual(normalize_error({"detail": ["first", "second"]}).message, "first")

    def test_detail_object_is_stringified(self):
        self.assertEqual(normalize_error({"detail": {"code": 1}}).message, '{"code": 1}')

    def test_detail_wins_over_message(self):
        self.assertEqual(normalize_error({"message": "m", "detail": "d"}).message, "d")

    def test_message_string(self):
        self.assertEqual(normalize_error({"message": "Quota exceeded"}).message, "Quota exceeded")

    def test_non_string_message_is_skipped(self):
        out = normalize_error({"message": 5, "title": "required"})
        self.assertEqual(out.message, "title: required")
        self.assertTrue(out.has_field_errors)

    def test_errors_object_reports_field(self):
        sink = _Sink()
        out = normalize_error({"errors": {"email": ["Invalid address"]}}, sink)
        self.assertEqual(out.message, "email: Invalid address")
        self.assertTrue(out.has_field_errors)
        self.assertEqual(dict(out.field_errors), {"email": "Invalid address"})
        self.assertEqual(sink.calls, [("email", "Invalid address")])

    def test_errors_object_uses_first_entry_only(self):
        out = normalize_error({"errors": {"email": "taken", "name": ["required"]}})
        self.assertEqual(out.message, "email: taken")

    def test_errors_list_uses_first_element(self):
        out = normalize_error({"errors": ["first", "second"]})
        self.assertEqual(out.message, "first")
        self.assertFalse(out.has_field_errors)

    def test_errors_list_stringifies_objects(self):
        self.assertEqual(normalize_error({"errors": [{"code": "x"}]}).message, '{"code": "x"}')

    def test_unusable_errors_object_falls_through(self):
        out = normalize_error({"errors": {"email": []}, "name": ["required"]})
        self.assertEqual(out.message, "name: required")
        self.assertTrue(out.has_field_errors)

    def test_non_field_errors(self):
        out = normalize_error({"non_field_errors": ["Conflict"]})
        self.assertEqual(out.message, "Conflict")
        self.assertFalse(out.has_field_errors)

    def test_field_errors_fan_out_to_sink_but_summarize_first(self):
        sink = _Sink()
        out = normalize_error(
            {
                "status": 400,
                "statusText": "Bad Request",
                "email": ["bad email"],
                "age": 3,
                "password": "too short",
                "nickname": [],
            },
            sink,
        )
        self.assertEqual(out.message, "email: bad email")
        self.assertTrue(out.has_field_errors)
        self.assertEqual(sink.calls, [("email", "bad email"), ("password", "too short")])
        self.assertEqual(dict(out.field_errors), {"email": "bad email", "password": "too short"})

    def test_field_errors_without_sink(self):
        out = normalize_error({"title": ["required"]})
        self.assertEqual(out.message, "title: required")

    def test_reserved_only_falls_back(self):
        for value in ({}, {"status": 500, "statusText": "Server Error"}, {"detail": "", "message": ""}):
            with self.subTest(value=value):
                out = normalize_error(value)
                self.assertEqual(out.message, DEFAULT_ERROR_MESSAGE)
                self.assertFalse(out.has_field_errors)

    def test_result_is_immutable(self):
        out = normalize_error({"errors": {"email": ["Invalid address"]}})
        with self.assertRaises(Exception):
            out.message = "changed"  # type: ignore[misc]
        with self.assertRaises(TypeError):
            out.field_errors["email"] = "changed"  # type: ignore[index]

    def test_constructed_field_errors_are_copied(self):
        source = {"a": "b"}
        out = NormalizedError(message="m", field_errors=source, has_field_errors=True)
        source["a"] = "changed"
        self.assertEqual(out.field_errors["a"], "b")


if __name__ == "__main__":
    unittest.main()
