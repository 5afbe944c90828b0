# telegraph/cli.py
"""
  telegraph encode "SOS Café"
  telegraph decode ... --- ... / -.-. .- ..-. .
  telegraph play --wpm 20 "... --- ..."
  telegraph play --text "CQ CQ"
  telegraph table --pretty

Le opzioni vanno prima del testo/Morse: tutto ciò che segue il primo
argomento posizionale è contenuto, anche se comincia con '-'.
"""
import argparse
import logging
import sys

from telegraph import codec
from telegraph.errors import ConfigurationError
from telegraph.player import BackgroundPlayer
from telegraph.sequencer import PlaybackSequencer
from telegraph.settings import MorseSettings
from telegraph.sinks import TerminalSink
from telegraph.symbols import MORSE

log = logging.getLogger(__name__)

COMMANDS = ("encode", "decode", "play", "table")
_FLAGS  = {"-h", "--help", "--text", "--pretty"}
_VALUED = {"--wpm"}


def protect_positionals(argv):
    """
    '---' o '-.-' per argparse sembrano opzioni: inserisce '--' davanti al
    primo argomento posizionale del sottocomando.
    """
    argv = list(argv)
    i = next((k for k, a in enumerate(argv) if a in COMMANDS), None)
    if i is None:
        return argv
    i += 1
    while i < len(argv):
        a = argv[i]
        if a == "--":
            break
        if a in _FLAGS or ("=" in a and a.split("=", 1)[0] in _VALUED):
            i += 1
        elif a in _VALUED:
            i += 2
        else:
            argv.insert(i, "--")
            break
    return argv


def build_parser():
    p = argparse.ArgumentParser(prog="telegraph", description="Morse transcoder and player")
    p.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    sub = p.add_subparsers(dest="command", required=True)

    enc = sub.add_parser("encode", help="text -> morse")
    enc.add_argument("text", nargs="+")

    dec = sub.add_parser("decode", help="morse -> text")
    dec.add_argument("morse", nargs="+")

    play = sub.add_parser("play", help="play morse on the terminal")
    play.add_argument("input", nargs="+")
    play.add_argument("--wpm", type=float, default=MorseSettings.wpm)
    play.add_argument("--text", action="store_true", help="input is plain text")

    table = sub.add_parser("table", help="reference table")
    table.add_argument("--pretty", action="store_true", help="show • and — instead of . and -")
    return p


def _play(morse: str, wpm: float, out) -> int:
    player = BackgroundPlayer(PlaybackSequencer(TerminalSink(out)))
    player.start(morse, wpm)
    try:
        while not player.wait(0.1):
            pass
    except KeyboardInterrupt:
        player.cancel()
        player.wait()
        out.write("\n")
        return 130
    out.write("\n")
    return 0


def main(argv=None, out=None) -> int:
    out = out or sys.stdout
    if argv is None:
        argv = sys.argv[1:]
    args = build_parser().parse_args(protect_positionals(argv))
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING,
                        format="%(asctime)s %(name)s %(levelname)s: %(message)s")

    if args.command == "encode":
        out.write(codec.encode(" ".join(args.text)) + "\n")
        return 0
    if args.command == "decode":
        out.write(codec.decode(" ".join(args.morse)) + "\n")
        return 0
    if args.command == "table":
        for ch, code in MORSE.items():
            out.write(f"{ch}  {codec.pretty_morse(code) if args.pretty else code}\n")
        return 0

    raw = " ".join(args.input)
    morse = codec.encode(raw) if args.text else codec.normalize_morse(raw)
    try:
        return _play(morse, args.wpm, out)
    except ConfigurationError as e:
        log.error("%s", e)
        return 2


if __name__ == "__main__":
    sys.exit(main())
