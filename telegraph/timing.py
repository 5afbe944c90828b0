# telegraph/timing.py
"""
Modello temporale: WPM -> durata unità (ms) e stringa Morse -> token.

  '.'   -> Pulse(1, 1)    on 1 unità, off 1 unità
  '-'   -> Pulse(3, 1)
  ' '   -> Gap(2)         fine lettera (con l'off della Pulse fanno 3)
  ' / ' -> Gap(6)         fine parola
più un Gap(2) finale, così l'ultimo off viene sempre rispettato.
"""
import math
from dataclasses import dataclass

from telegraph.errors import ConfigurationError

LETTER_GAP_UNITS = 2
WORD_GAP_UNITS   = 6


@dataclass(frozen=True)
class Pulse:
    on_units: int
    off_units: int = 1

    @property
    def is_dash(self) -> bool:
        return self.on_units >= 3

    @property
    def units(self) -> int:
        return self.on_units + self.off_units


@dataclass(frozen=True)
class Gap:
    units: int


DOT  = Pulse(1, 1)
DASH = Pulse(3, 1)


def _check_wpm(wpm):
    try:
        value = float(wpm)
    except (TypeError, ValueError):
        raise ConfigurationError(f"wpm must be a number, got {wpm!r}") from None
    if not math.isfinite(value) or value <= 0:
        raise ConfigurationError(f"wpm must be a positive number, got {wpm!r}")
    return value


def unit_duration(wpm) -> float:
    """Durata dell'unità in millisecondi: 2000 / WPM."""
    return 2000.0 / _check_wpm(wpm)


def dash_threshold(wpm, factor: float = 2.2) -> float:
    """Soglia dot/dash del manipolatore in ms (factor·unit)."""
    return factor * 2000.0 / _check_wpm(wpm)


def tokens_of(normalized: str, unit: float = None) -> list:
    """
    Token di una stringa GIA' normalizzata (vedi codec.normalize_morse).
    `unit` non cambia i token (sono in unità): serve solo a chi li converte.
    """
    if not normalized:
        return []
    tokens = []
    for ch in normalized.replace(" / ", "/"):
        if ch == ".":
            tokens.append(DOT)
        elif ch == "-":
            tokens.append(DASH)
        elif ch == " ":
            tokens.append(Gap(LETTER_GAP_UNITS))
        elif ch == "/":
            tokens.append(Gap(WORD_GAP_UNITS))
        else:
            raise ValueError(f"unexpected character {ch!r} in normalized morse")
    tokens.append(Gap(LETTER_GAP_UNITS))
    return tokens


def total_units(tokens) -> int:
    return sum(tk.units for tk in tokens)


def duration_ms(tokens, unit: float) -> float:
    return total_units(tokens) * unit
