"""Composition root: one store, one processor, one command service.

WHY: The bot, the HTTP server and the CLI all need the same wired-up
objects. Building them in one place means the configuration store is
created exactly once per process and injected everywhere it is used.

HOW: build_container() turns Settings into a ServiceHub dataclass. Tests
can pass their own store to skip backend selection.

RULES:
- No module-level singletons; callers hold the ServiceHub
- The store is selected by create_store() unless one is passed in
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from snagbot.config import Settings, load_settings
from snagbot.core.commands import CommandService
from snagbot.core.pipeline import MessageProcessor
from snagbot.store import ChannelConfigStore, create_store


@dataclass
class ServiceHub:
    settings: Settings
    store: ChannelConfigStore
    processor: MessageProcessor
    commands: CommandService


def build_container(
    settings: Optional[Settings] = None,
    store: Optional[ChannelConfigStore] = None,
) -> ServiceHub:
    settings = settings or load_settings()
    store = store or create_store(settings)
    return ServiceHub(
        settings=settings,
        store=store,
        processor=MessageProcessor(store),
        commands=CommandService(store, command=settings.slash_command),
    )
