# telegraph/codec.py
"""
Conversione testo <-> Morse, funzioni pure.

Formato Morse canonico: codici lettera separati da uno spazio, parole
separate da ' / ', nessun separatore in testa o in coda.
  encode("SOS")          -> "... --- ..."
  decode("... --- ...")  -> "SOS"
"""
import re
import unicodedata

from telegraph.symbols import MORSE, CODE_TO_CHAR

UNKNOWN = "\ufffd"    # codice senza corrispondenza in ricezione
WORD_SEP = " / "

_COMBINING = re.compile("[\u0300-\u036f]")
_DOTS      = re.compile(r"[•·]")
_DASHES    = re.compile(r"[–—]")
_PIPES     = re.compile(r"\|+")
_SLASH     = re.compile(r"\s*/\s*")
_FOREIGN   = re.compile(r"[^.\-/\s]")


def normalize_text(text: str) -> str:
    """NFD + rimozione diacritici + maiuscolo: 'Café' -> 'CAFE'."""
    decomposed = unicodedata.normalize("NFD", text or "")
    return _COMBINING.sub("", decomposed).upper()


def normalize_morse(morse: str) -> str:
    """
    Porta qualunque stringa alla forma canonica. Totale e idempotente:
    glifi alternativi (•·–—|) convertiti, tutto il resto diventa spazio,
    separatori di parola doppi/in testa/in coda eliminati.
    """
    s = _DOTS.sub(".", morse or "")
    s = _DASHES.sub("-", s)
    s = _PIPES.sub("/", s)
    s = _SLASH.sub(" / ", s)
    s = _FOREIGN.sub(" ", s)

    out = []
    for part in s.split():
        if part == "/" and (not out or out[-1] == "/"):
            continue
        out.append(part)
    while out and out[-1] == "/":
        out.pop()
    return " ".join(out)


def encode(text: str) -> str:
    words = []
    for word in normalize_text(text).split():
        codes = [MORSE[ch] for ch in word if ch in MORSE]
        if codes:
            words.append(" ".join(codes))
    return WORD_SEP.join(words)


def pretty_morse(morse: str) -> str:
    """Versione da tabella: '.' -> '•', '-' -> '—' (normalize_morse la riporta indietro)."""
    return (morse or "").replace(".", "•").replace("-", "—")


def decode(morse: str) -> str:
    norm = normalize_morse(morse)
    if not norm:
        return ""
    words = []
    for word in norm.split(WORD_SEP):
        words.append("".join(CODE_TO_CHAR.get(code, UNKNOWN) for code in word.split()))
    return " ".join(words)
