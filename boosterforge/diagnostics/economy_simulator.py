"""Economy simulation helpers."""

from __future__ import annotations

from dataclasses import dataclass, field
from random import Random
from typing import Dict

from ..app import BoosterApp
from ..domain.draw import PackDrawEngine, PackOpeningResult
from ..domain.prizes import CoinsPrize, FreePackPrize, JackpotPrize, ResolvedPrize
from ..domain.wheel import WheelService


@dataclass(slots=True)
class SimulationResult:
    opens: int
    cards: int = 0
    holos: int = 0
    skipped: int = 0
    coins_spent: int = 0
    slot_types: Dict[str, int] = field(default_factory=dict)
    unique_cards: set[str] = field(default_factory=set)

    @property
    def average_cards(self) -> float:
        return self.cards / self.opens if self.opens else 0.0

    @property
    def holo_rate(self) -> float:
        return self.holos / self.opens if self.opens else 0.0

    def merge(self, result: PackOpeningResult, price: int) -> None:
        self.coins_spent += price
        self.skipped += len(result.skipped)
        for drawn in result.cards:
            self.cards += 1
            self.unique_cards.add(drawn.card.card_id)
            if drawn.is_holo:
                self.holos += 1
            key = drawn.slot_type.value
            self.slot_types[key] = self.slot_types.get(key, 0) + 1


@dataclass(slots=True)
class WheelSimulationResult:
    spins: int
    coins_spent: int = 0
    coins_returned: int = 0
    prizes: Dict[str, int] = field(default_factory=dict)

    @property
    def return_rate(self) -> float:
        return self.coins_returned / self.coins_spent if self.coins_spent else 0.0


class EconomySimulator:
    """Monte-Carlo simulation of pack openings and wheel spins.

    Draws run on a private engine and RNG, so simulating never touches player
    state, daily limits, or the application's own random stream.
    """

    def __init__(self, app: BoosterApp, *, rng: Random | None = None) -> None:
        self._app = app
        self._rng = rng or Random()
        self._engine = PackDrawEngine(app.catalog, app.packs, app.config.draw, rng=self._rng)

    def simulate(self, pack_id: str, *, opens: int = 1000) -> SimulationResult:
        pack = self._app.packs.get(pack_id)
        result = SimulationResult(opens=opens)
        for _ in range(opens):
            result.merge(self._engine.open(pack_id), pack.price or 0)
        return result

    def simulate_wheel(self, *, spins: int = 1000) -> WheelSimulationResult:
        config = self._app.config.wheel
        wheel = WheelService(
            self._app.economy,
            self._app.prize_resolver,
            config,
            self._app.event_bus,
            segments=self._app.wheel.segments,
            rng=self._rng,
        )
        result = WheelSimulationResult(spins=spins)
        for _ in range(spins):
            prize = wheel.pick()
            result.coins_spent += config.spin_cost
            result.coins_returned += self._coin_value(prize, 0)
            key = prize.kind.value
            result.prizes[key] = result.prizes.get(key, 0) + 1
        return result

    def _coin_value(self, prize: ResolvedPrize, depth: int) -> int:
        config = self._app.config.wheel
        if isinstance(prize, CoinsPrize):
            return prize.amount or 0
        if isinstance(prize, FreePackPrize):
            return config.free_pack_coins
        if isinstance(prize, JackpotPrize) and depth < config.max_jackpot_depth:
            return sum(self._coin_value(sub, depth + 1) for sub in prize.prizes)
        return 0
