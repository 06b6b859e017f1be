"""
Mode registry.

Modes is an immutable, ordered collection of providers. detect() and plan()
fan out one task per provider inside an asyncio.TaskGroup: the first failure
cancels the remaining tasks and is raised on its own, wrapped in ModeError.
"""

import asyncio
import dataclasses
import logging
from typing import Awaitable, Callable, Dict, Iterable, Iterator, List, Optional, Tuple

from ...core.exceptions import ModeError, UnknownModeError
from ..executor import DefaultExecutor
from .base import DetectRequest, ModeProvider, PlanRequest, PlanResult


class Modes:
    def __init__(self, providers: Iterable[ModeProvider] = ()):
        self._providers: Tuple[ModeProvider, ...] = tuple(providers)

    def __iter__(self) -> Iterator[ModeProvider]:
        return iter(self._providers)

    def __len__(self) -> int:
        return len(self._providers)

    def __getitem__(self, index: int) -> ModeProvider:
        return self._providers[index]

    def __repr__(self) -> str:
        return f"Modes({self.names()})"

    def names(self) -> List[str]:
        """All provider names, sorted."""
        return sorted(provider.name for provider in self._providers)

    def filter(self, include: Iterable[str]) -> "Modes":
        """Providers named in ``include``, in that order. Fails on the first unknown name."""
        available = {provider.name: provider for provider in self._providers}

        filtered = []
        for name in include:
            if name not in available:
                raise UnknownModeError(name)
            filtered.append(available[name])
        return Modes(filtered)

    async def detect(self, req: Optional[DetectRequest] = None) -> "Modes":
        """Providers that reported their ecosystem as present, in completion order."""
        req = req or DetectRequest()
        if req.executor is None:
            req = dataclasses.replace(req, executor=DefaultExecutor())

        detected: List[ModeProvider] = []

        async def _detect(provider: ModeProvider) -> None:
            if await provider.detect(req):
                detected.append(provider)

        await self._run_all("detecting", _detect)
        logging.debug(f"Detected modes: {sorted(p.name for p in detected)}")
        return Modes(detected)

    async def plan(self, req: Optional[PlanRequest] = None) -> Dict[str, PlanResult]:
        """Plan every provider; the result maps provider name to its plan."""
        req = dataclasses.replace(req or PlanRequest(), enabled_modes=tuple(self.names()))
        if req.executor is None:
            req = dataclasses.replace(req, executor=DefaultExecutor())

        plans: Dict[str, PlanResult] = {}

        async def _plan(provider: ModeProvider) -> None:
            plans[provider.name] = await provider.plan(req)

        await self._run_all("planning", _plan)
        return plans

    async def _run_all(
        self,
        operation: str,
        func: Callable[[ModeProvider], Awaitable[None]],
    ) -> None:
        async def _guarded(provider: ModeProvider) -> None:
            try:
                await func(provider)
            except Exception as e:
                raise ModeError(operation, provider.name, e) from e

        try:
            async with asyncio.TaskGroup() as group:
                for provider in self._providers:
                    group.create_task(_guarded(provider), name=f"{operation}-{provider.name}")
        except ExceptionGroup as eg:
            # first failure wins, siblings were cancelled
            raise eg.exceptions[0]
