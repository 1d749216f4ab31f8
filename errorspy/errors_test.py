"""
Test cases for structured error construction, merging and rendering.
"""

import copy
import io
import json
import pickle
import unittest
from unittest import mock

from .core.stack import NullStackCapturer, StackCapturer, set_stack_capturer
from .errors import (
    NO_ERROR,
    ErrorBuilder,
    StructuredError,
    is_kind,
    kind_of,
    new_error,
)
from .helper.config import StackConfiguration, configure_stack
from .helper.error import StringError, str_error
from .helper.logging import ErrorsLogger
from .model.code import CODE_NOT_FOUND, CODE_SERVER_ERROR, Code, Op
from .model.kind import Kind


def _load_user() -> StructuredError:
    return new_error(Op("users.Load"), Kind.NOT_EXIST, "user 42")


class TestNewError(unittest.TestCase):
    """Test fragment handling of new_error."""

    def test_no_fragments_raises(self):
        with self.assertRaises(ValueError):
            new_error()

    def test_none_fragment_returns_none(self):
        """Wrapping a None error yields None, wherever it appears."""
        self.assertIsNone(new_error(None))
        self.assertIsNone(new_error(Op("x"), Kind.IO, None))
        self.assertIsNone(new_error(None, Op("x"), "message"))
        self.assertIsNone(new_error(object(), None))

    def test_fields(self):
        err = new_error(CODE_NOT_FOUND, Op("users.Get"), Kind.NOT_EXIST, "user 42")

        self.assertIsInstance(err, StructuredError)
        self.assertEqual(err.code, 404)
        self.assertEqual(err.op, "users.Get")
        self.assertIs(err.kind, Kind.NOT_EXIST)
        self.assertEqual(err.wrapped, StringError("user 42"))

    def test_fragment_order_does_not_matter(self):
        a = new_error("user 42", Kind.NOT_EXIST, Op("users.Get"), CODE_NOT_FOUND)
        b = new_error(CODE_NOT_FOUND, Op("users.Get"), Kind.NOT_EXIST, "user 42")
        self.assertEqual(str(a), str(b))

    def test_plain_exception_is_wrapped(self):
        cause = ConnectionError("connection refused")
        err = new_error(Op("db.Connect"), cause)

        self.assertIs(err.wrapped, cause)
        self.assertIs(err.unwrap(), cause)

    def test_default_leaf_is_empty_string_error(self):
        err = new_error(Op("jobs.Run"))

        self.assertEqual(err.wrapped, StringError(""))
        self.assertEqual(str(err), "jobs.Run\n")

    def test_last_wrapped_fragment_wins(self):
        err = new_error("first", "second")
        self.assertEqual(str(err.wrapped), "second")

    def test_unknown_fragment_returns_plain_error(self):
        """Unsupported fragments degrade to a string error."""
        err = new_error(Op("x"), 3.5)

        self.assertIsInstance(err, StringError)
        self.assertNotIsInstance(err, StructuredError)
        self.assertEqual(str(err), "unknown type float, value 3.5 in error call")

    def test_plain_int_is_not_a_code(self):
        err = new_error(404, "missing")
        self.assertIsInstance(err, StringError)
        self.assertIn("unknown type int", str(err))

    def test_bool_is_not_a_kind(self):
        self.assertIsInstance(new_error(True), StringError)

    def test_unknown_fragment_with_failing_repr(self):
        """A fragment that cannot be printed still yields an error."""

        class Unprintable:
            def __repr__(self):
                raise RuntimeError("no repr")

        err = new_error(Op("x"), Unprintable())

        self.assertIsInstance(err, StringError)
        self.assertIn("unknown type Unprintable, value <", str(err))

    def test_bad_stack_depth_in_environment(self):
        """Construction does not fail on a broken stack setting."""
        try:
            for value in ["six", "0"]:
                with mock.patch.dict("os.environ", {"ERRORSPY_STACK_DEPTH": value}):
                    configure_stack()
                    err = new_error(Op("x"), "boom")

                self.assertIsInstance(err, StructuredError)
                self.assertEqual(str(err), "x\nboom")
                self.assertEqual(len(err.stack.frames), 1)
        finally:
            configure_stack(StackConfiguration())


class TestRendering(unittest.TestCase):
    """Test the text form of structured errors."""

    def test_kind_op_and_message(self):
        err = new_error(Op("db.Insert"), Kind.DATABASE, "connection refused")
        self.assertEqual(str(err), "database error: db.Insert\nconnection refused")

    def test_code_marker_order(self):
        err = new_error(Code(404), Kind.NOT_EXIST, "user 42")
        self.assertEqual(str(err), "code : item does not exist\nuser 42")

    def test_only_message(self):
        self.assertEqual(str(new_error("plain")), "plain")

    def test_nothing_set(self):
        self.assertEqual(str(new_error(Kind.OTHER)), NO_ERROR)
        self.assertEqual(str(StructuredError()), NO_ERROR)

    def test_other_kind_not_printed(self):
        err = new_error(Kind.OTHER, Op("x"), "y")
        self.assertEqual(str(err), "x\ny")

    def test_render_is_deterministic(self):
        err = new_error(Op("db.Insert"), Kind.DATABASE, "connection refused")
        self.assertEqual(str(err), str(err))
        self.assertEqual(err.to_json(), err.to_json())

    def test_can_be_raised(self):
        with self.assertRaises(StructuredError) as cm:
            raise new_error(Op("jobs.Run"), Kind.TIMEOUT, "deadline exceeded")
        self.assertIs(cm.exception.kind, Kind.TIMEOUT)

    def test_repr(self):
        err = new_error(Code(500), Op("x"), Kind.IO, "y")
        self.assertEqual(
            repr(err),
            "StructuredError(code=500, op='x', kind=IO, wrapped=StringError('y'))",
        )


class TestMerge(unittest.TestCase):
    """Test deduplication when a structured error wraps another."""

    def test_same_kind_printed_once(self):
        inner = new_error(Op("disk.Read"), Kind.IO, "short read")
        outer = new_error(Op("files.Load"), Kind.IO, inner)

        self.assertEqual(str(outer).count("I/O error"), 1)
        self.assertEqual(str(outer), "I/O error: files.Load\ndisk.Read\nshort read")
        self.assertIs(outer.wrapped.kind, Kind.OTHER)

    def test_same_code_printed_once(self):
        inner = new_error(CODE_SERVER_ERROR, "boom")
        outer = new_error(CODE_SERVER_ERROR, Op("api.Handle"), inner)

        self.assertEqual(str(outer).count("code "), 1)
        self.assertEqual(outer.wrapped.code, 0)

    def test_different_code_kept(self):
        inner = new_error(CODE_NOT_FOUND, "missing")
        outer = new_error(CODE_SERVER_ERROR, inner)

        self.assertEqual(outer.wrapped.code, 404)
        self.assertEqual(str(outer), "code \ncode \nmissing")

    def test_kind_pulled_up(self):
        inner = _load_user()
        outer = new_error(Op("api.GetUser"), inner)

        self.assertIs(outer.kind, Kind.NOT_EXIST)
        self.assertIs(outer.wrapped.kind, Kind.OTHER)
        self.assertEqual(
            str(outer), "item does not exist: api.GetUser\nusers.Load\nuser 42"
        )

    def test_different_kinds_kept(self):
        inner = new_error(Kind.TIMEOUT, "deadline exceeded")
        outer = new_error(Kind.DATABASE, inner)

        self.assertIs(outer.kind, Kind.DATABASE)
        self.assertIs(outer.wrapped.kind, Kind.TIMEOUT)

    def test_kind_bubbles_through_layers(self):
        err = _load_user()
        err = new_error(Op("service.Get"), err)
        err = new_error(Op("api.Get"), CODE_NOT_FOUND, err)

        self.assertIs(err.kind, Kind.NOT_EXIST)
        self.assertEqual(
            str(err),
            "code : item does not exist: api.Get\nservice.Get\nusers.Load\nuser 42",
        )

    def test_inner_error_not_mutated(self):
        """The caller's inner error keeps its classification."""
        inner = new_error(CODE_SERVER_ERROR, Kind.IO, "short read")
        outer = new_error(CODE_SERVER_ERROR, Op("files.Load"), inner)

        self.assertIsNot(outer.wrapped, inner)
        self.assertIs(inner.kind, Kind.IO)
        self.assertEqual(inner.code, 500)
        self.assertIs(outer.kind, Kind.IO)
        self.assertIs(outer.wrapped.kind, Kind.OTHER)

    def test_inner_can_be_wrapped_twice(self):
        inner = _load_user()
        first = new_error(Op("a"), inner)
        second = new_error(Op("b"), inner)

        self.assertIs(first.kind, Kind.NOT_EXIST)
        self.assertIs(second.kind, Kind.NOT_EXIST)

    def test_plain_leaf_not_merged(self):
        err = new_error(Kind.IO, str_error("eof"))
        self.assertIs(err.kind, Kind.IO)


class TestErrorBuilder(unittest.TestCase):
    """Test the fluent builder."""

    def test_build(self):
        err = (
            ErrorBuilder()
            .with_op("db.Insert")
            .with_kind(Kind.DATABASE)
            .with_wrapped("connection refused")
            .build()
        )
        self.assertEqual(str(err), "database error: db.Insert\nconnection refused")

    def test_build_matches_new_error(self):
        inner = _load_user()
        built = ErrorBuilder().with_code(404).with_wrapped(inner).build()
        made = new_error(Code(404), inner)

        self.assertEqual(str(built), str(made))
        self.assertIsInstance(built.code, Code)
        self.assertIs(built.kind, Kind.NOT_EXIST)

    def test_wrapped_none_builds_none(self):
        self.assertIsNone(ErrorBuilder().with_op("x").with_wrapped(None).build())

    def test_unknown_wrapped_value(self):
        err = ErrorBuilder().with_wrapped(12).build()
        self.assertIsInstance(err, StringError)

    def test_no_capture_when_nothing_is_built(self):
        """The stack is only walked when a structured error is returned."""
        capturer = mock.create_autospec(StackCapturer, instance=True)
        set_stack_capturer(capturer)
        try:
            self.assertIsNone(ErrorBuilder().with_wrapped(None).build())
            self.assertIsInstance(ErrorBuilder().with_wrapped(12).build(), StringError)
        finally:
            set_stack_capturer()

        capturer.capture.assert_not_called()

    def test_build_twice_is_independent(self):
        inner = _load_user()
        builder = ErrorBuilder().with_op("api.Get").with_wrapped(inner)
        first = builder.build()
        second = builder.build()

        self.assertIsNot(first.wrapped, second.wrapped)
        self.assertIs(second.kind, Kind.NOT_EXIST)


class TestStack(unittest.TestCase):
    """Test the stack captured at construction."""

    def tearDown(self):
        set_stack_capturer()

    def test_stack_captured_at_call_site(self):
        err = new_error(Op("db.Insert"), Kind.DATABASE, "connection refused")
        frames = err.stack.frames

        self.assertEqual(len(frames), 1)
        self.assertIn("errors_test.py:", frames[0])
        self.assertTrue(
            frames[0].endswith(
                'err = new_error(Op("db.Insert"), Kind.DATABASE, "connection refused")'
            )
        )

    def test_stack_through_helper(self):
        frames = _load_user().stack.frames

        self.assertEqual(len(frames), 2)
        self.assertTrue(frames[0].endswith("return new_error(Op(\"users.Load\"), Kind.NOT_EXIST, \"user 42\")"))
        self.assertTrue(frames[1].endswith("frames = _load_user().stack.frames"))

    def test_builder_stack_captured_at_build(self):
        err = ErrorBuilder().with_wrapped("x").build()
        self.assertTrue(err.stack.frames[0].endswith('err = ErrorBuilder().with_wrapped("x").build()'))

    def test_format_stack(self):
        err = new_error("x")
        text = err.format_stack()

        self.assertTrue(text.startswith("\n"))
        self.assertEqual(text, "".join("\n" + f for f in err.stack.frames))

    def test_null_capturer(self):
        set_stack_capturer(NullStackCapturer())
        err = new_error("x")

        self.assertEqual(err.stack.frames, [])
        self.assertEqual(err.format_stack(), "")

    def test_logger_prints_stack(self):
        stream = io.StringIO()
        logger = ErrorsLogger(name="errors_test", stream=stream)
        err = new_error(Op("db.Insert"), Kind.DATABASE, "connection refused")

        logger.error("insert failed", error=err, with_stack=True)

        output = stream.getvalue()
        self.assertIn("insert failed: database error: db.Insert\nconnection refused", output)
        self.assertIn("errors_test.py:", output)


class TestSerialization(unittest.TestCase):
    """Test JSON, copy and pickle support."""

    def test_to_dict_shape(self):
        err = new_error(Code(404), Op("users.Get"), Kind.NOT_EXIST, "user 42")
        data = err.to_dict()

        self.assertEqual(set(data), {"code", "op", "kind", "err", "stack"})
        self.assertEqual(data["code"], 404)
        self.assertEqual(data["op"], "users.Get")
        self.assertEqual(data["kind"], 5)
        self.assertEqual(data["err"], "user 42")
        self.assertIsInstance(data["stack"], list)
        self.assertTrue(all(isinstance(f, str) for f in data["stack"]))

    def test_to_json_stringifies_chain(self):
        inner = new_error(Op("users.Load"), "user 42")
        outer = new_error(Op("api.Get"), Kind.NOT_EXIST, inner)
        data = json.loads(outer.to_json())

        self.assertEqual(data["err"], "users.Load\nuser 42")
        self.assertEqual(data["kind"], int(Kind.NOT_EXIST))

    def test_to_dict_empty(self):
        data = StructuredError().to_dict()
        self.assertEqual(data, {"code": 0, "op": "", "kind": 0, "err": "", "stack": []})

    def test_copy(self):
        err = new_error(Code(500), Op("x"), Kind.IO, "y")
        clone = copy.copy(err)
        clone.kind = Kind.OTHER

        self.assertIs(err.kind, Kind.IO)
        self.assertEqual(clone.op, "x")
        self.assertIs(clone.stack, err.stack)

    def test_pickle(self):
        err = new_error(Op("users.Get"), _load_user())
        restored = pickle.loads(pickle.dumps(err))

        self.assertEqual(str(restored), str(err))
        self.assertEqual(restored.to_dict(), err.to_dict())
        self.assertIsInstance(restored.wrapped, StructuredError)


class TestKindHelpers(unittest.TestCase):
    def test_kind_of_top_level(self):
        self.assertIs(kind_of(new_error(Kind.TIMEOUT, "slow")), Kind.TIMEOUT)

    def test_kind_of_walks_chain(self):
        inner = new_error(Kind.TIMEOUT, "slow")
        outer = StructuredError(op="manual", wrapped=inner)
        self.assertIs(kind_of(outer), Kind.TIMEOUT)

    def test_kind_of_plain_error(self):
        self.assertIs(kind_of(ValueError("x")), Kind.OTHER)
        self.assertIs(kind_of(None), Kind.OTHER)

    def test_is_kind(self):
        err = new_error(Op("api.Get"), _load_user())

        self.assertTrue(is_kind(err, Kind.NOT_EXIST))
        self.assertFalse(is_kind(err, Kind.IO))
        self.assertFalse(is_kind(ValueError("x"), Kind.OTHER))
        self.assertFalse(is_kind(None, Kind.NOT_EXIST))


class TestPublicApi(unittest.TestCase):
    def test_package_exports(self):
        import errorspy

        self.assertIs(errorspy.new_error, new_error)
        self.assertIs(errorspy.Kind, Kind)
        for name in errorspy.__all__:
            self.assertTrue(hasattr(errorspy, name), name)


if __name__ == "__main__":
    unittest.main()
