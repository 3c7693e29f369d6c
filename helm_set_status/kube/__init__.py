"""Kubernetes-backed release storage, driven through kubectl."""

from .storage import KubeReleaseStore, default_store_factory

__all__ = ["KubeReleaseStore", "default_store_factory"]
