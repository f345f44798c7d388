import importlib
import json
import os
import sys
import tempfile
import threading
import unittest
from pathlib import Path
from unittest.mock import patch

ROOT = Path(__file__).resolve().parents[1]
ETL_PATH = ROOT / "etl"
if str(ETL_PATH) not in sys.path:
    sys.path.insert(0, str(ETL_PATH))

import dataimport  # noqa: E402
from dataimport._config import load_connection_config  # noqa: E402
from dataimport._logging import redact_config, redact_url  # noqa: E402
from dataimport.context import Context, QueryCounter  # noqa: E402
from dataimport.exceptions import SEVERE, DataImportError  # noqa: E402
from dataimport.sources.base_connector import Fetchable, RowProducible  # noqa: E402
from dataimport.sources.factory import create_connector, load_connector_config  # noqa: E402
from dataimport.sources.jsonapi import JSONAPIDataSource, JSONAPIEntityProcessor  # noqa: E402


class ConfigTests(unittest.TestCase):
    def test_load_connection_config_merges_layers(self):
        with tempfile.NamedTemporaryFile("w", suffix=".json", delete=False) as tmp:
            json.dump({"base_url": "https://file.local/", "encoding": "latin-1"}, tmp)
            file_path = tmp.name

        try:
            with patch.dict(os.environ, {"DITEST_READ_TIMEOUT": "7000"}, clear=False):
                result = load_connection_config(
                    config={"encoding": "utf-8"},
                    file_path=file_path,
                    env_prefix="DITEST",
                    required=("base_url",),
                    defaults={"connection_timeout": 5000},
                    overrides={"connection_timeout": 2000, "base_url": None},
                )
        finally:
            os.unlink(file_path)

        self.assertEqual(result["base_url"], "https://file.local/")
        self.assertEqual(result["encoding"], "utf-8")
        self.assertEqual(result["read_timeout"], "7000")
        self.assertEqual(result["connection_timeout"], 2000)

    def test_load_connection_config_missing_required_raises(self):
        with self.assertRaises(ValueError):
            load_connection_config(required=("base_url",), defaults={"read_timeout": 10000})

    def test_load_connection_config_missing_file_raises(self):
        with self.assertRaises(FileNotFoundError):
            load_connection_config(file_path="/nonexistent/jsonapi.json")

    def test_load_connection_config_applies_resolver_to_strings_only(self):
        result = load_connection_config(
            config={"base_url": "${root}/v1/", "read_timeout": 3000},
            resolver=lambda text: text.replace("${root}", "https://api.local"),
        )

        self.assertEqual(result["base_url"], "https://api.local/v1/")
        self.assertEqual(result["read_timeout"], 3000)


class LoggingHelperTests(unittest.TestCase):
    def test_redact_config_masks_sensitive_keys(self):
        redacted = redact_config({"base_url": "https://x", "access_token": "abc", "password": None})

        self.assertEqual(redacted["base_url"], "https://x")
        self.assertEqual(redacted["access_token"], "***")
        self.assertIsNone(redacted["password"])

    def test_redact_url_masks_userinfo_and_secret_params(self):
        redacted = redact_url("https://user:pw@api.local/items?api_key=abc&page=2")

        self.assertEqual(redacted, "https://***@api.local/items?api_key=***&page=2")

    def test_redact_url_leaves_plain_urls_alone(self):
        url = "https://api.local/items?page=2"
        self.assertEqual(redact_url(url), url)
        self.assertIsNone(redact_url(None))


class ContextTests(unittest.TestCase):
    def test_replace_tokens_resolves_flat_and_nested_names(self):
        context = Context(
            variables={
                "dataimporter.request.page": "3",
                "api": {"root": "https://api.local"},
            }
        )

        self.assertEqual(
            context.replace_tokens("${api.root}/items?page=${dataimporter.request.page}"),
            "https://api.local/items?page=3",
        )

    def test_replace_tokens_drops_unknown_names(self):
        context = Context()

        self.assertEqual(context.replace_tokens("items?since=${missing}"), "items?since=")
        self.assertEqual(context.replace_tokens("no tokens"), "no tokens")
        self.assertIsNone(context.replace_tokens(None))

    def test_get_resolved_entity_attribute(self):
        context = Context(variables={"kind": "books"}, entity_attributes={"url": "${kind}?page=1"})

        self.assertEqual(context.get_resolved_entity_attribute("url"), "books?page=1")
        self.assertIsNone(context.get_resolved_entity_attribute("missing"))

    def test_data_source_reads_token_substituted_config(self):
        context = Context(variables={"root": "https://api.local/"})

        source = JSONAPIDataSource(base_url="${root}", connection_timeout="1500", context=context)

        self.assertEqual(source.base_url, "https://api.local/")
        self.assertEqual(source.config.connection_timeout, 1500)
        self.assertIs(source.counter, context.counter)


class QueryCounterTests(unittest.TestCase):
    def test_increment_is_safe_across_threads(self):
        counter = QueryCounter()

        def work():
            for _ in range(250):
                counter.increment()

        threads = [threading.Thread(target=work) for _ in range(4)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        self.assertEqual(counter.value, 1000)


class ContractTests(unittest.TestCase):
    def test_jsonapi_classes_satisfy_protocols(self):
        source = JSONAPIDataSource(base_url="https://api.local/")

        self.assertIsInstance(source, Fetchable)
        self.assertIsInstance(JSONAPIEntityProcessor(), RowProducible)
        self.assertNotIsInstance(JSONAPIEntityProcessor(), Fetchable)

    def test_data_import_error_defaults_to_severe(self):
        error = DataImportError("boom", url="https://api.local/")

        self.assertEqual(error.severity, SEVERE)
        self.assertTrue(error.is_severe)
        self.assertEqual(error.url, "https://api.local/")


class ConnectorFactoryTests(unittest.TestCase):
    def test_create_connector_from_dict_builds_jsonapi_data_source(self):
        counter = QueryCounter()

        source = create_connector(
            {"protocol": "JSONAPI", "base_url": "https://api.local/", "read_timeout": 2000},
            counter=counter,
        )

        self.assertIsInstance(source, JSONAPIDataSource)
        self.assertEqual(source.base_url, "https://api.local/")
        self.assertEqual(source.config.read_timeout, 2000)
        self.assertIs(source.counter, counter)

    def test_load_connector_config_reads_json_file(self):
        with tempfile.TemporaryDirectory() as temp_dir:
            config_path = Path(temp_dir) / "source.json"
            config_path.write_text(json.dumps({"protocol": "jsonapi", "base_url": "https://api.local/"}), encoding="utf-8")

            config = load_connector_config(config_path)

        self.assertEqual(config["protocol"], "jsonapi")
        self.assertEqual(config["base_url"], "https://api.local/")

    def test_load_connector_config_reads_yaml_file(self):
        with tempfile.TemporaryDirectory() as temp_dir:
            config_path = Path(temp_dir) / "source.yaml"
            config_path.write_text("protocol: jsonapi\nbase_url: https://api.local/\nencoding: UTF-16\n", encoding="utf-8")

            config = load_connector_config(str(config_path))

        self.assertEqual(config["encoding"], "UTF-16")

    def test_load_connector_config_rejects_unknown_suffix(self):
        with tempfile.TemporaryDirectory() as temp_dir:
            config_path = Path(temp_dir) / "source.ini"
            config_path.write_text("protocol=jsonapi", encoding="utf-8")

            with self.assertRaises(ValueError):
                load_connector_config(config_path)

    def test_create_connector_raises_for_unknown_protocol(self):
        with self.assertRaises(ValueError):
            create_connector({"protocol": "gopher"})

    def test_create_connector_imports_only_the_protocol_module(self):
        with patch("dataimport.sources.factory.importlib.import_module", wraps=importlib.import_module) as mock_import:
            create_connector({"protocol": "jsonapi", "base_url": "https://api.local/"})

        mock_import.assert_called_once_with("dataimport.sources.jsonapi.data_source")

    def test_create_connector_surfaces_missing_dependency_of_known_protocol(self):
        missing = ModuleNotFoundError("No module named 'requests'", name="requests")
        with patch("dataimport.sources.factory.importlib.import_module", side_effect=missing):
            with self.assertRaises(ModuleNotFoundError):
                create_connector({"protocol": "jsonapi"})

    def test_create_connector_requires_protocol(self):
        with self.assertRaises(ValueError):
            create_connector({"base_url": "https://api.local/"})

    def test_create_connector_wraps_bad_parameters(self):
        with self.assertRaises(TypeError) as ctx:
            create_connector({"protocol": "jsonapi", "page_size": 10})

        self.assertIn("jsonapi", str(ctx.exception))


class PublicRouterTests(unittest.TestCase):
    def test_test_connection_routes_jsonapi(self):
        with patch.object(dataimport, "test_jsonapi_connection", return_value=True) as mock_check:
            self.assertTrue(dataimport.test_connection({"protocol": "jsonapi", "base_url": "https://api.local/"}, "items"))

        mock_check.assert_called_once_with("items", base_url="https://api.local/")

    def test_test_connection_raises_for_unsupported_protocol(self):
        with self.assertRaises(ValueError):
            dataimport.test_connection({"protocol": "ftp"}, "items")
