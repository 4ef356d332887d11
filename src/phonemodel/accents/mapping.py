"""AccentMapper: reduces universal feature bundles to accent phonemes.

Holds a reference to a :class:`SymbolRegistry` and a set of registered
accents, and owns each accent's phoneme inventory. Inventories are built
explicitly, at most once per accent, even under concurrent requests.
Each inventory remembers the registry generation it was built from and
is discarded once the registry reloads a new table.
"""

from __future__ import annotations

import enum
import logging
import threading
from concurrent.futures import Future
from typing import Iterable, Protocol

from phonemodel.errors import (
    AccentDefinitionError,
    InventoryBuildCancelled,
    InventoryBuildFailed,
    InventoryNotReady,
    UnknownAccent,
    UnrealizableInAccent,
)
from phonemodel.features.model import FeatureBundle
from phonemodel.accents.accent import Accent
from phonemodel.accents.inventory import Phoneme, PhonemeInventory
from phonemodel.symbols.registry import SymbolRegistry
from phonemodel.symbols.symbol import Symbol


logger = logging.getLogger(__name__)


class CancelSignal(Protocol):
    """Anything with an ``is_set()`` method, e.g. ``threading.Event``."""

    def is_set(self) -> bool: ...


class InventoryState(enum.Enum):
    """Lifecycle of an accent's inventory."""

    UNINITIALIZED = "uninitialized"
    BUILDING = "building"
    READY = "ready"


class AccentMapper:
    """The accent mapping layer.

    Args:
        registry: The universal symbol registry. The mapper reads from
            it; the registry never learns about accents.
        accents: Accents to register up front.
    """

    def __init__(
        self, registry: SymbolRegistry, accents: Iterable[Accent] = ()
    ) -> None:
        self._registry = registry
        self._lock = threading.Lock()
        self._accents: dict[str, Accent] = {}
        self._builds: dict[str, Future] = {}
        # accent name -> (registry generation, inventory)
        self._ready: dict[str, tuple[int, PhonemeInventory]] = {}
        for accent in accents:
            self.register(accent)

    @property
    def registry(self) -> SymbolRegistry:
        return self._registry

    @property
    def accents(self) -> list[str]:
        """Names of registered accents, sorted."""
        with self._lock:
            return sorted(self._accents)

    # --- Registration ---

    def register(self, accent: Accent) -> Accent:
        """Register an accent after checking its rules against the registry.

        Registering the same Accent object twice is a no-op.

        Raises:
            AccentDefinitionError: If a rule names an unknown feature or
                value, or a different accent already uses this name.
        """
        accent.validate_against(self._registry.features)
        with self._lock:
            existing = self._accents.get(accent.name)
            if existing is not None and existing is not accent:
                raise AccentDefinitionError(
                    f"An accent named {accent.name!r} is already registered"
                )
            self._accents[accent.name] = accent
        return accent

    def accent(self, name: str) -> Accent:
        """Look up a registered accent.

        Raises:
            UnknownAccent: If no accent has that name.
        """
        with self._lock:
            try:
                return self._accents[name]
            except KeyError:
                raise UnknownAccent(
                    f"Unknown accent: {name!r}. "
                    f"Registered: {', '.join(sorted(self._accents)) or '(none)'}"
                ) from None

    def _lookup(self, accent: Accent | str) -> Accent:
        if isinstance(accent, str):
            return self.accent(accent)
        return self.register(accent)

    def state(self, accent: Accent | str) -> InventoryState:
        """Current lifecycle state of an accent's inventory."""
        name = self._lookup(accent).name
        with self._lock:
            if self._current(name) is not None:
                return InventoryState.READY
            if name in self._builds:
                return InventoryState.BUILDING
            return InventoryState.UNINITIALIZED

    # --- Inventory construction ---

    def _current(self, name: str) -> PhonemeInventory | None:
        """The ready inventory for ``name`` if it matches the registry.

        Must be called with the lock held. A stale entry is dropped.
        """
        entry = self._ready.get(name)
        if entry is None:
            return None
        generation, inventory = entry
        if generation != self._registry.generation:
            logger.info(
                "Discarding inventory for accent %r: registry was reloaded", name
            )
            del self._ready[name]
            return None
        return inventory

    def inventory(
        self, accent: Accent | str, cancel: CancelSignal | None = None
    ) -> PhonemeInventory:
        """Fetch an accent's inventory, building it first if needed.

        Only one build runs per accent. Callers arriving while it runs
        wait for it and receive the same inventory instance (or the
        same error). A failed or cancelled build leaves the accent
        uninitialized, so a later call starts afresh.

        Cancellation belongs to the caller that supplied the signal. If
        the building caller is cancelled, its waiters do not see
        ``InventoryBuildCancelled``; the first of them to wake takes
        over and starts a new build, and the rest wait on that one.
        A waiter's own ``cancel`` is only consulted once it is building.

        An inventory built before the registry reloaded its table is
        discarded and rebuilt against the new table.

        Args:
            accent: Accent object or registered name. Unregistered
                Accent objects are registered first.
            cancel: Optional signal checked between symbols while this
                call is the one building.

        Raises:
            InventoryBuildFailed: If a symbol is unrealizable in the
                accent and not a tolerated gap.
            InventoryBuildCancelled: If ``cancel`` was set mid-build.
        """
        acc = self._lookup(accent)
        name = acc.name

        while True:
            with self._lock:
                ready = self._current(name)
                if ready is not None:
                    return ready
                future = self._builds.get(name)
                owner = future is None
                if owner:
                    future = Future()
                    self._builds[name] = future
                    generation = self._registry.generation

            if owner:
                break
            logger.debug("Waiting on in-flight inventory build for %r", name)
            try:
                return future.result()
            except InventoryBuildCancelled:
                logger.debug(
                    "Inventory build for %r was cancelled by its owner; retrying",
                    name,
                )

        try:
            inventory = self._build(acc, cancel)
        except BaseException as exc:
            with self._lock:
                del self._builds[name]
            future.set_exception(exc)
            raise

        with self._lock:
            self._ready[name] = (generation, inventory)
            del self._builds[name]
        future.set_result(inventory)
        return inventory

    def build_inventory(
        self, accent: Accent | str, cancel: CancelSignal | None = None
    ) -> PhonemeInventory:
        """Build an accent's inventory now, ahead of any reduction.

        Same contract as :meth:`inventory`; returns the existing instance
        if the accent is already ready.
        """
        return self.inventory(accent, cancel=cancel)

    def ready_inventory(self, accent: Accent | str) -> PhonemeInventory:
        """An accent's inventory, without building it.

        Raises:
            InventoryNotReady: If the inventory has not been built, or
                was built before the registry last reloaded.
        """
        name = self._lookup(accent).name
        with self._lock:
            inventory = self._current(name)
        if inventory is None:
            raise InventoryNotReady(
                f"Inventory for accent {name!r} has not been built. "
                f"Call inventory() first."
            )
        return inventory

    def _build(self, accent: Accent, cancel: CancelSignal | None) -> PhonemeInventory:
        """Iterate the registry's symbol space once and group by reduction."""
        name = accent.name
        registry = self._registry
        logger.info("Building phoneme inventory for accent %r", name)

        classes: dict[FeatureBundle, list[Symbol]] = {}
        gaps = 0
        for symbol in registry.symbols():
            if cancel is not None and cancel.is_set():
                logger.info("Inventory build for accent %r cancelled", name)
                raise InventoryBuildCancelled(
                    f"Inventory build for accent {name!r} was cancelled"
                )
            reduced = accent.reduce_bundle(registry.resolve(symbol))
            if not accent.is_realizable(reduced):
                if accent.tolerates(reduced):
                    gaps += 1
                    logger.debug("Accent %r skips %r (tolerated gap)", name, symbol)
                    continue
                cause = UnrealizableInAccent(name, reduced)
                logger.info(
                    "Inventory build for accent %r failed at %r", name, symbol
                )
                raise InventoryBuildFailed(name, symbol, cause) from cause
            classes.setdefault(reduced, []).append(symbol)

        phonemes = [
            Phoneme(
                accent=name,
                bundle=bundle,
                label=registry.render(symbols[0]),
                index=index,
                symbols=tuple(symbols),
            )
            for index, (bundle, symbols) in enumerate(classes.items())
        ]
        inventory = PhonemeInventory(name, phonemes)
        logger.info(
            "Built inventory for accent %r: %d phonemes (%d consonants, "
            "%d vowels), %d tolerated gaps",
            name, inventory.size, len(inventory.consonants),
            len(inventory.vowels), gaps,
        )
        return inventory

    # --- Reduction ---

    def reduce(self, accent: Accent | str, bundle: FeatureBundle) -> Phoneme:
        """Reduce a feature bundle to the accent's phoneme.

        Never triggers an inventory build. Idempotent: reducing a
        phoneme's own bundle returns that phoneme.

        Raises:
            InventoryNotReady: If the accent's inventory is not built.
            UnrealizableInAccent: If the accent cannot realize the bundle.
        """
        acc = self._lookup(accent)
        inventory = self.ready_inventory(acc)
        reduced = acc.reduce_bundle(bundle)
        if not acc.is_realizable(reduced):
            raise UnrealizableInAccent(acc.name, bundle)
        phoneme = inventory.get(reduced)
        if phoneme is None:
            raise UnrealizableInAccent(
                acc.name, bundle, "no phoneme in the inventory has these features"
            )
        return phoneme

    def reduce_symbol(self, accent: Accent | str, symbol: Symbol | str) -> Phoneme:
        """Resolve a symbol (object or written IPA) and reduce it."""
        if isinstance(symbol, str):
            symbol = self._registry.parse(symbol)
        return self.reduce(accent, self._registry.resolve(symbol))

    def __repr__(self) -> str:
        with self._lock:
            return (
                f"AccentMapper(accents={sorted(self._accents)}, "
                f"ready={sorted(self._ready)})"
            )
