"""Extractors copying request sources into intermediate objects."""

from .headers import HeaderExtractor
from .path_variables import PathVariableExtractor
from .query_params import QueryParamExtractor


__all__ = ["HeaderExtractor", "PathVariableExtractor", "QueryParamExtractor"]
