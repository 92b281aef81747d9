"""Resources and data sources served by the FRAM provider."""
from .baseurlsource import BaseURLSourceDataSource, BaseURLSourceResource
from .serviceaccount import ServiceAccountDataSource, ServiceAccountResource

RESOURCES = [BaseURLSourceResource, ServiceAccountResource]
DATA_SOURCES = [BaseURLSourceDataSource, ServiceAccountDataSource]

__all__ = [
    "BaseURLSourceDataSource",
    "BaseURLSourceResource",
    "ServiceAccountDataSource",
    "ServiceAccountResource",
    "RESOURCES",
    "DATA_SOURCES",
]
