from __future__ import annotations

import unittest

from json_yup import MISSING, Reference, ValidationError, yup


class PresenceTests(unittest.TestCase):
    def test_missing_and_null(self) -> None:
        schema = yup.mixed()
        self.assertTrue(schema.is_valid())
        self.assertFalse(schema.is_valid(None))
        self.assertTrue(schema.nullable().is_valid(None))
        self.assertFalse(schema.nullable().required().is_valid(None))

    def test_required_message_uses_path_and_label(self) -> None:
        with self.assertRaises(ValidationError) as ctx:
            yup.string().required().label("Name").validate()
        self.assertEqual(ctx.exception.errors, ["Name is a required field"])

    def test_not_required_undoes_required(self) -> None:
        schema = yup.number().required()
        self.assertFalse(schema.is_valid())
        self.assertTrue(schema.not_required().is_valid())
        self.assertTrue(schema.optional().is_valid())

    def test_default_fills_missing_values(self) -> None:
        schema = yup.number().default(3).max(5)
        self.assertEqual(schema.validate(), 3)
        self.assertEqual(schema.validate(MISSING), 3)
        self.assertFalse(yup.number().default(9).max(5).is_valid())

    def test_one_of_and_not_one_of(self) -> None:
        colours = yup.string().one_of(["red", "green"])
        self.assertTrue(colours.is_valid("red"))
        self.assertFalse(colours.is_valid("blue"))
        self.assertTrue(colours.is_valid())

        banned = yup.string().not_one_of(["admin"], "${path} is reserved")
        with self.assertRaises(ValidationError) as ctx:
            banned.validate("admin")
        self.assertEqual(ctx.exception.errors, ["this is reserved"])

    def test_custom_test(self) -> None:
        schema = yup.number().test("even", "${path} must be even", lambda value: value % 2 == 0)
        self.assertTrue(schema.is_valid(2))
        self.assertFalse(schema.is_valid(3))
        with self.assertRaises(TypeError):
            yup.number().test("even", None, "not callable")


class NumberTests(unittest.TestCase):
    def test_casting(self) -> None:
        self.assertEqual(yup.number().validate("5"), 5)
        self.assertEqual(yup.number().validate(" 2.5 "), 2.5)
        for value in ["abc", "nan", True, [], {}]:
            with self.subTest(value=value):
                self.assertFalse(yup.number().is_valid(value))

    def test_bounds(self) -> None:
        cases = [
            (yup.number().min(2), [2, 3], [1]),
            (yup.number().max(2), [1, 2], [3]),
            (yup.number().more_than(2), [3], [2]),
            (yup.number().less_than(2), [1], [2]),
            (yup.number().positive(), [1], [0, -1]),
            (yup.number().negative(), [-1], [0, 1]),
            (yup.number().integer(), [1, 2.0], [1.5]),
        ]
        for schema, success, failure in cases:
            for value in success:
                with self.subTest(value=value, expected=True):
                    self.assertTrue(schema.is_valid(value))
            for value in failure:
                with self.subTest(value=value, expected=False):
                    self.assertFalse(schema.is_valid(value))

    def test_integer_accepts_huge_ints(self) -> None:
        schema = yup.number().integer()
        self.assertTrue(schema.is_valid(10**400))
        self.assertTrue(schema.is_valid(-(10**400)))
        self.assertFalse(schema.is_valid(0.5))

    def test_later_bound_replaces_earlier(self) -> None:
        schema = yup.number().min(10).min(1)
        self.assertTrue(schema.is_valid(5))
        self.assertEqual(len(schema.checks), 1)


class StringTests(unittest.TestCase):
    def test_casting(self) -> None:
        self.assertEqual(yup.string().validate(12), "12")
        self.assertFalse(yup.string().is_valid(True))
        self.assertFalse(yup.string().is_valid({}))

    def test_lengths(self) -> None:
        self.assertFalse(yup.string().min(3).is_valid("ab"))
        self.assertFalse(yup.string().max(3).is_valid("abcd"))
        self.assertTrue(yup.string().length(2).is_valid("ab"))
        self.assertFalse(yup.string().length(2).is_valid("abc"))

    def test_matches_options(self) -> None:
        schema = yup.string().matches(r"^\d+$", {"message": "digits only", "excludeEmptyString": True})
        self.assertTrue(schema.is_valid(""))
        self.assertTrue(schema.is_valid("123"))
        with self.assertRaises(ValidationError) as ctx:
            schema.validate("12a")
        self.assertEqual(ctx.exception.errors, ["digits only"])

    def test_default_matches_message_names_the_pattern(self) -> None:
        with self.assertRaises(ValidationError) as ctx:
            yup.string().matches(r"^a").validate("b")
        self.assertEqual(ctx.exception.errors, ['this must match the following: "^a"'])

    def test_formats(self) -> None:
        self.assertTrue(yup.string().email().is_valid("a@example.com"))
        self.assertFalse(yup.string().email().is_valid("not-an-email"))
        self.assertTrue(yup.string().url().is_valid("https://example.com/x"))
        self.assertFalse(yup.string().url().is_valid("example"))
        self.assertTrue(yup.string().lowercase().is_valid("abc"))
        self.assertFalse(yup.string().uppercase().is_valid("abc"))

    def test_trim(self) -> None:
        self.assertEqual(yup.string().trim().validate("  hi "), "hi")
        self.assertFalse(yup.string().trim().required().is_valid("   "))


class BooleanTests(unittest.TestCase):
    def test_casting(self) -> None:
        self.assertIs(yup.boolean().validate("true"), True)
        self.assertIs(yup.boolean().validate("False"), False)
        self.assertFalse(yup.boolean().is_valid(1))


class ObjectTests(unittest.TestCase):
    def test_field_errors_carry_paths(self) -> None:
        schema = yup.object().shape(
            {
                "test": yup.number().required(),
                "title": yup.object().shape({"en": yup.string().required()}),
            }
        )
        with self.assertRaises(ValidationError) as ctx:
            schema.validate({"title": {}})
        self.assertEqual(
            ctx.exception.errors,
            ["test is a required field", "title.en is a required field"],
        )
        self.assertEqual(len(ctx.exception.inner), 2)

    def test_shape_merges_and_keeps_unknown_keys(self) -> None:
        schema = yup.object().shape({"a": yup.number()}).shape({"b": yup.string()})
        self.assertEqual(set(schema.fields), {"a", "b"})
        self.assertEqual(schema.validate({"a": "1", "c": True}), {"a": 1, "c": True})

    def test_no_unknown(self) -> None:
        schema = yup.object({"a": yup.number()}).no_unknown()
        self.assertTrue(schema.is_valid({"a": 1}))
        self.assertFalse(schema.is_valid({"a": 1, "b": 2}))

    def test_shape_rejects_non_schema_fields(self) -> None:
        with self.assertRaises(TypeError):
            yup.object().shape({"a": 5})

    def test_reference_resolves_against_siblings(self) -> None:
        schema = yup.object().shape(
            {
                "low": yup.number(),
                "high": yup.number().min(yup.ref("low")),
            }
        )
        self.assertTrue(schema.is_valid({"low": 1, "high": 2}))
        self.assertFalse(schema.is_valid({"low": 3, "high": 2}))
        self.assertTrue(schema.is_valid({"high": 2}))

    def test_reference_of_another_type_fails_the_bound(self) -> None:
        schema = yup.object().shape(
            {
                "start": yup.string(),
                "end": yup.number().min(yup.ref("start")),
            }
        )
        self.assertFalse(schema.is_valid({"start": "abc", "end": 3}))
        with self.assertRaises(ValidationError) as ctx:
            schema.validate({"start": "abc", "end": 3})
        self.assertEqual(len(ctx.exception.errors), 1)

    def test_reference_in_allowed_values(self) -> None:
        schema = yup.object().shape(
            {
                "password": yup.string().required(),
                "confirm": yup.string().one_of([yup.ref("password")], "Passwords must match"),
            }
        )
        self.assertTrue(schema.is_valid({"password": "s3cret", "confirm": "s3cret"}))
        with self.assertRaises(ValidationError) as ctx:
            schema.validate({"password": "s3cret", "confirm": "other"})
        self.assertEqual(ctx.exception.errors, ["Passwords must match"])


class ArrayTests(unittest.TestCase):
    def test_of_and_bounds(self) -> None:
        schema = yup.array().of(yup.number().required()).min(1).max(2)
        self.assertEqual(schema.validate(("1", 2)), [1, 2])
        self.assertFalse(schema.is_valid([]))
        self.assertFalse(schema.is_valid([1, 2, 3]))
        self.assertFalse(schema.is_valid([None]))
        self.assertFalse(schema.is_valid("12"))

    def test_of_requires_a_schema(self) -> None:
        with self.assertRaises(TypeError):
            yup.array().of("number")


class ReferenceTests(unittest.TestCase):
    def test_dotted_keys(self) -> None:
        ref = yup.ref("a.b")
        self.assertEqual(ref, Reference("a.b"))
        self.assertEqual(ref.resolve({"a": {"b": 1}}), 1)
        self.assertIs(ref.resolve({"a": {}}), MISSING)
        self.assertIs(ref.resolve(None), MISSING)

    def test_ref_needs_a_key(self) -> None:
        with self.assertRaises(TypeError):
            yup.ref("")


class ImmutabilityTests(unittest.TestCase):
    def test_refinements_return_new_schemas(self) -> None:
        base = yup.string()
        required = base.required()
        self.assertIsNot(base, required)
        self.assertTrue(base.is_valid())
        self.assertFalse(required.is_valid())


if __name__ == "__main__":
    unittest.main()
