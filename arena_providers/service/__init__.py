"""Service layer: catalog loading, the per-model run loop and the controller."""

from .controller import AggregationController
from .model_catalog_loader import CatalogError, load_catalog
from .model_run import ModelRun

__all__ = ["AggregationController", "CatalogError", "ModelRun", "load_catalog"]
