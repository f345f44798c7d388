from .base_connector import Fetchable, Record, RowProducible
from .factory import create_connector, load_connector_config

__all__ = ["Fetchable", "Record", "RowProducible", "create_connector", "load_connector_config"]
