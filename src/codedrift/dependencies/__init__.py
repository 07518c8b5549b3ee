"""Dependency manifests, registries and freshness classification."""

from .manifests import DependencySpec
from .registries import Registry, RegistryClient, Release
from .resolver import DependencyResolver, classify

__all__ = [
    "DependencySpec",
    "DependencyResolver",
    "Registry",
    "RegistryClient",
    "Release",
    "classify",
]
