import unittest

import lexicon_schema as ls
from lexicon_schema import xrpc
from lexicon_schema.lexicon import Lexicon

from tests._util import error_of, lexicon, ok_value, single


class QueryTests(unittest.TestCase):
    def setUp(self):
        self.schema = lexicon({
            "main": {
                "type": "query",
                "parameters": {
                    "type": "params",
                    "required": ["q"],
                    "properties": {
                        "q": {"type": "string"},
                        "limit": {"type": "integer", "minimum": 1, "maximum": 100, "default": 25},
                        "cursor": {"type": "string"},
                    },
                },
                "output": {
                    "encoding": "application/json",
                    "schema": {
                        "type": "object",
                        "required": ["user"],
                        "properties": {"user": {"type": "ref", "ref": "#user"}},
                    },
                },
            },
            "user": {
                "type": "object",
                "required": ["did", "handle"],
                "properties": {"did": {"type": "string"}, "handle": {"type": "string"}},
            },
        })

    def test_parameters_with_default(self):
        self.assertEqual(ok_value(ls.validate_parameters(self.schema, "main", {"q": "cats"})),
                         {"q": "cats", "limit": 25})

    def test_parameter_constraints(self):
        self.assertEqual(
            error_of(ls.validate_parameters(self.schema, "main", {"q": "cats", "limit": 101})),
            "main/limit can not be greater than 100",
        )

    def test_missing_required_parameter(self):
        self.assertEqual(error_of(ls.validate_parameters(self.schema, "main", {})),
                         'main must have the parameter "q"')

    def test_optional_parameters(self):
        result = ok_value(ls.validate_parameters(self.schema, "main", {"q": "x", "cursor": "abc"}))
        self.assertEqual(result["cursor"], "abc")

    def test_output(self):
        data = {"user": {"did": "did:plc:abc", "handle": "alice.test"}}
        self.assertEqual(ok_value(ls.validate_output(self.schema, "main", data)), data)
        self.assertEqual(
            error_of(ls.validate_output(self.schema, "main", {"user": {"did": "did:plc:abc"}})),
            'main/user must have the property "handle"',
        )

    def test_undeclared_input_accepts_anything(self):
        self.assertEqual(ok_value(ls.validate_input(self.schema, "main", {"free": "form"})),
                         {"free": "form"})

    def test_tags_never_leak_into_the_result(self):
        result = ok_value(ls.validate_parameters(self.schema, "main", {"q": "cats"}))
        self.assertNotIn(xrpc.PART_KEY, result)
        self.assertNotIn(xrpc.ERROR_KEY, result)

    def test_part_value_must_be_an_object(self):
        self.assertEqual(error_of(ls.validate_input(self.schema, "main", "text")), "main must be an object")


class ProcedureTests(unittest.TestCase):
    def setUp(self):
        self.schema = single({
            "type": "procedure",
            "input": {
                "encoding": "application/json",
                "schema": {
                    "type": "object",
                    "required": ["text"],
                    "properties": {"text": {"type": "string", "maxLength": 300}},
                },
            },
            "output": {
                "encoding": "application/json",
                "schema": {
                    "type": "object",
                    "required": ["uri", "cid"],
                    "properties": {"uri": {"type": "string"}, "cid": {"type": "string"}},
                },
            },
            "errors": [
                {"name": "InvalidCredentials", "schema": {
                    "type": "object", "required": ["message"],
                    "properties": {"message": {"type": "string"}, "retryAfter": {"type": "integer"}}}},
                {"name": "AccountLocked"},
                {"name": "RateLimited"},
            ],
        })

    def test_input(self):
        self.assertEqual(ok_value(ls.validate_input(self.schema, "main", {"text": "hi"})), {"text": "hi"})
        self.assertEqual(
            error_of(ls.validate_input(self.schema, "main", {"text": "x" * 301})),
            "main/text must not be longer than 300 characters",
        )

    def test_untagged_value_is_validated_as_input(self):
        self.assertEqual(ok_value(ls.validate(self.schema, "main", {"text": "hi"})), {"text": "hi"})
        self.assertEqual(error_of(ls.validate(self.schema, "main", {})), 'main must have the property "text"')

    def test_output(self):
        self.assertEqual(error_of(ls.validate_output(self.schema, "main", {"uri": "at://x"})),
                         'main must have the property "cid"')

    def test_error_with_schema(self):
        ok_value(ls.validate_error(self.schema, "main", "InvalidCredentials", {"message": "bad password"}))
        ok_value(ls.validate_error(self.schema, "main", "InvalidCredentials",
                                   {"message": "slow down", "retryAfter": 30}))
        self.assertEqual(error_of(ls.validate_error(self.schema, "main", "InvalidCredentials", {})),
                         'main must have the property "message"')

    def test_error_without_schema_accepts_anything(self):
        self.assertEqual(ok_value(ls.validate_error(self.schema, "main", "AccountLocked", {"any": 1})),
                         {"any": 1})

    def test_unknown_error_name(self):
        self.assertEqual(
            error_of(ls.validate_error(self.schema, "main", "UnknownError", {})),
            "main unknown error 'UnknownError', expected one of: "
            "InvalidCredentials, AccountLocked, RateLimited",
        )

    def test_endpoint_without_errors(self):
        schema = single({"type": "procedure"})
        self.assertEqual(error_of(ls.validate_error(schema, "main", "Anything", {})),
                         "main has no errors defined")
        schema = single({"type": "procedure", "errors": []})
        self.assertEqual(error_of(ls.validate_error(schema, "main", "Anything", {})),
                         "main has no errors defined")

    def test_malformed_errors_definition(self):
        schema = single({"type": "procedure", "errors": "Oops"})
        self.assertEqual(error_of(ls.validate_error(schema, "main", "Oops", {})),
                         "main has an invalid errors definition")

    def test_error_key_is_data_outside_error_payloads(self):
        schema = single({"type": "procedure", "input": {"schema": {
            "type": "object", "properties": {"$error": {"type": "string"}}}}})
        self.assertEqual(ok_value(ls.validate_input(schema, "main", {"$error": "kept"})),
                         {"$error": "kept"})
        self.assertEqual(ok_value(ls.validate(schema, "main", {"$xrpc": "input", "$error": "kept"})),
                         {"$error": "kept"})


class SubscriptionTests(unittest.TestCase):
    def setUp(self):
        self.schema = lexicon({
            "main": {
                "type": "subscription",
                "message": {"schema": {"type": "union", "refs": ["#commit", "#identity"]}},
            },
            "commit": {"type": "object", "required": ["repo"],
                       "properties": {"repo": {"type": "string"}}},
            "identity": {"type": "object", "required": ["did"],
                         "properties": {"did": {"type": "string"}}},
        })

    def test_message_members(self):
        ok_value(ls.validate_message(self.schema, "main", {"$type": "#commit", "repo": "did:plc:a"}))
        ok_value(ls.validate_message(self.schema, "main", {"$type": "#identity", "did": "did:plc:a"}))

    def test_invalid_message(self):
        self.assertEqual(error_of(ls.validate_message(self.schema, "main", {"$type": "#commit"})),
                         'main must have the property "repo"')

    def test_subscription_without_message_definition(self):
        schema = single({"type": "subscription"})
        self.assertEqual(ok_value(ls.validate_message(schema, "main", {"x": 1})), {"x": 1})


class BodyShapeTests(unittest.TestCase):
    def test_direct_schema_without_wrapper(self):
        schema = single({
            "type": "procedure",
            "input": {"type": "object", "required": ["a"], "properties": {"a": {"type": "string"}}},
            "output": {"type": "object", "required": ["b"], "properties": {"b": {"type": "string"}}},
        })
        ok_value(ls.validate_input(schema, "main", {"a": "x"}))
        self.assertEqual(error_of(ls.validate_output(schema, "main", {})), 'main must have the property "b"')

    def test_encoding_only_body_is_opaque(self):
        schema = single({"type": "procedure", "input": {"encoding": "*/*"}})
        self.assertEqual(ok_value(ls.validate_input(schema, "main", {"blob": "..."})), {"blob": "..."})

    def test_null_schema_is_opaque(self):
        schema = single({"type": "query", "output": {"encoding": "application/json", "schema": None}})
        ok_value(ls.validate_output(schema, "main", {"anything": True}))

    def test_query_without_parameters_definition(self):
        schema = single({"type": "query"})
        self.assertEqual(ok_value(ls.validate_parameters(schema, "main", {"q": 1})), {"q": 1})

    def test_invalid_parameters_definition(self):
        schema = single({"type": "query", "parameters": {"type": "object", "properties": {}}})
        self.assertEqual(error_of(ls.validate_parameters(schema, "main", {})),
                         "main has an invalid parameters definition")

    def test_part_entry_points_require_an_endpoint(self):
        schema = single({"type": "object", "properties": {}})
        self.assertEqual(error_of(ls.validate_input(schema, "main", {})),
                         "Definition 'main' is not an XRPC endpoint")


class TagTests(unittest.TestCase):
    def test_tag_copies_and_marks(self):
        value = {"a": 1}
        tagged = xrpc.tag(value, "error", "Oops")
        self.assertEqual(tagged, {"a": 1, "$xrpc": "error", "$error": "Oops"})
        self.assertEqual(value, {"a": 1})

    def test_unknown_part_is_rejected(self):
        with self.assertRaises(ValueError):
            xrpc.tag({}, "headers")

    def test_unknown_part_tag_on_value(self):
        lex = Lexicon.from_mapping(single({"type": "query"}))
        self.assertEqual(
            error_of(ls.validate(lex, "main", {"$xrpc": "headers"})),
            "main has an unknown XRPC part 'headers'",
        )


if __name__ == "__main__":
    unittest.main()
