import numpy as np


class SignalSimulator:
    """
    Random-walk GNSS signal bars in [0, max_bars]. Each tick has a small chance
    of moving one bar up or down.
    """

    def __init__(
        self,
        rng: np.random.Generator,
        *,
        start: int = 4,
        max_bars: int = 4,
        p_change: float = 0.05,
    ):
        self.rng, self.max_bars, self.p_change = rng, max_bars, p_change
        self.bars = int(np.clip(start, 0, max_bars))

    def step(self) -> int:
        if self.rng.random() < self.p_change:
            delta = 1 if self.rng.random() > 0.5 else -1
            self.bars = int(np.clip(self.bars + delta, 0, self.max_bars))
        return self.bars
