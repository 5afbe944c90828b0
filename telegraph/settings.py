# telegraph/settings.py
from dataclasses import dataclass

from telegraph.errors import ConfigurationError
from telegraph.timing import unit_duration, dash_threshold


@dataclass
class MorseSettings:
    """
    Parametri di tempo condivisi da player e manipolatore.
    dash_factor e le due finestre di inattività sono valori empirici
    (default di parità col comportamento storico), non timing ITU.
    """
    wpm: int = 18
    min_wpm: int = 5
    max_wpm: int = 40

    dash_factor: float = 2.2        # '-' se pressione >= 2.2·unit
    letter_gap_ms: float = 1500.0   # inattività -> fine lettera
    word_gap_ms: float = 3500.0     # inattività -> fine parola
    debounce_ms: float = 2.0        # filtro rimbalzi tastiera

    def __post_init__(self):
        self.validate()

    def validate(self):
        if self.min_wpm <= 0 or self.max_wpm <= 0:
            raise ConfigurationError(f"wpm limits must be positive: {self.min_wpm}..{self.max_wpm}")
        if self.min_wpm > self.max_wpm:
            raise ConfigurationError(f"min_wpm {self.min_wpm} > max_wpm {self.max_wpm}")
        if self.wpm <= 0:
            raise ConfigurationError(f"wpm must be positive, got {self.wpm}")
        if self.dash_factor <= 0:
            raise ConfigurationError(f"dash_factor must be positive, got {self.dash_factor}")
        if self.letter_gap_ms <= 0 or self.word_gap_ms <= 0:
            raise ConfigurationError("gap windows must be positive")
        if self.letter_gap_ms >= self.word_gap_ms:
            raise ConfigurationError(
                f"letter_gap_ms ({self.letter_gap_ms}) must be shorter than word_gap_ms ({self.word_gap_ms})")

    def set_wpm(self, wpm: float) -> int:
        # semantica slider: arrotonda e resta nel range
        self.wpm = int(max(self.min_wpm, min(self.max_wpm, round(float(wpm)))))
        return self.wpm

    @property
    def unit_ms(self) -> float:
        return unit_duration(self.wpm)

    @property
    def dash_threshold_ms(self) -> float:
        return dash_threshold(self.wpm, self.dash_factor)
