import unittest

from datalayer.config import (
    HANDLER_ERRORS_ISOLATE,
    DatalayerSettings,
    DeliverySettings,
    load_default_settings,
    parse_settings,
    validate_settings,
)
from datalayer.datalayer import Datalayer


class TestSettings(unittest.TestCase):
    def test_default_yaml_matches_dataclass_defaults(self) -> None:
        self.assertEqual(load_default_settings(), DatalayerSettings())

    def test_partial_payload_keeps_defaults(self) -> None:
        settings = parse_settings({"meta_prefix": "odl:", "delivery": {"handler_errors": "isolate"}})
        self.assertEqual(settings.meta_prefix, "odl:")
        self.assertEqual(settings.delivery.handler_errors, HANDLER_ERRORS_ISOLATE)
        self.assertEqual(settings.test_mode.cookie_name, "__odltest__")

    def test_unknown_keys_rejected(self) -> None:
        with self.assertRaisesRegex(ValueError, "unknown datalayer config keys: plugins"):
            parse_settings({"plugins": []})
        with self.assertRaises(ValueError):
            parse_settings({"test_mode": {"cookie": "x"}})

    def test_type_errors_rejected(self) -> None:
        with self.assertRaises(ValueError):
            parse_settings({"test_mode": {"cookie_max_age_s": "week"}})
        with self.assertRaises(ValueError):
            parse_settings({"test_mode": {"cookie_max_age_s": True}})
        with self.assertRaises(ValueError):
            parse_settings({"delivery": []})

    def test_validation(self) -> None:
        with self.assertRaises(ValueError):
            validate_settings(DatalayerSettings(meta_prefix=""))
        with self.assertRaises(ValueError):
            parse_settings({"delivery": {"handler_errors": "ignore"}})

    def test_datalayer_rejects_invalid_settings(self) -> None:
        with self.assertRaises(ValueError):
            Datalayer(settings=DatalayerSettings(delivery=DeliverySettings(handler_errors="drop")))


if __name__ == "__main__":
    unittest.main()
