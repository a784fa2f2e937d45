"""Mock manager factory: selects implementation from config. Only place that imports concrete mock managers."""
from __future__ import annotations

from netkit.config.settings import Settings
from netkit.infrastructure.mock.base_url_mock_manager import BaseURLMockManager
from netkit.infrastructure.mock.directory_mock_manager import DirectoryMockManager
from netkit.infrastructure.mock.in_memory_mock_manager import InMemoryMockManager
from netkit.ports.endpoint import MockManager


def create_mock_manager(settings: Settings) -> MockManager | None:
    backend = settings.mock_backend.strip().lower()

    if backend in ("", "none"):
        return None

    if backend == "inmemory":
        return InMemoryMockManager(enabled=settings.mock_enabled, recording=settings.mock_recording)

    if backend == "directory":
        return DirectoryMockManager(
            settings.mock_directory,
            enabled=settings.mock_enabled,
            recording=settings.mock_recording,
        )

    if backend == "base_url":
        return BaseURLMockManager(settings.mock_base_url, enabled=settings.mock_enabled)

    raise ValueError(f"Unsupported mock backend: {backend}")
