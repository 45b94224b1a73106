from unittest import TestCase

from ts_to_json_schema.pipeline.config import DEFAULT_SCHEMA_URI, ConverterConfig, OutputFormat


class TestConverterConfig(TestCase):
    def test_defaults(self):
        config = ConverterConfig()
        self.assertTrue(config.detect_cycles)
        self.assertFalse(config.preserve_combinator_kind)
        self.assertFalse(config.fail_fast)
        self.assertEqual(config.date_format, "time")
        self.assertEqual(config.schema_uri, DEFAULT_SCHEMA_URI)
        self.assertEqual(config.output_format, OutputFormat.DOCUMENT)

    def test_from_dict(self):
        config = ConverterConfig.from_dict(
            {"ignore_declarations": ["A"], "date_format": "date-time", "output_format": "listing"}
        )
        self.assertEqual(config.ignore_declarations, ["A"])
        self.assertEqual(config.date_format, "date-time")
        self.assertIs(config.output_format, OutputFormat.LISTING)

    def test_unknown_keys_are_ignored(self):
        config = ConverterConfig.from_dict({"no_such_option": 1})
        self.assertFalse(hasattr(config, "no_such_option"))

    def test_invalid_output_format(self):
        with self.assertRaises(ValueError):
            ConverterConfig.from_dict({"output_format": "yaml"})

    def test_round_trip(self):
        config = ConverterConfig(order_declarations=["B"], indent=4, output_format=OutputFormat.LISTING)
        data = config.to_dict()
        self.assertEqual(data["output_format"], "listing")
        self.assertEqual(ConverterConfig.from_dict(data), config)

    def test_lists_are_not_shared(self):
        first = ConverterConfig()
        first.ignore_declarations.append("A")
        self.assertEqual(ConverterConfig().ignore_declarations, [])
