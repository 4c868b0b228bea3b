#!/usr/bin/env python3
"""
Check a symptom lexicon YAML for inconsistencies before deploying it.

Usage:
  python scripts/lint_lexicon.py                  # bundled intake/lexicon/symptoms.yaml (or $LEXICON_PATH)
  python scripts/lint_lexicon.py path/to/lex.yaml

Exits non-zero when problems are found.
"""

import argparse
import sys

from intake.lexicon.store import LexiconError, load_lexicon, validate_lexicon


def main(argv=None) -> int:
    ap = argparse.ArgumentParser()
    ap.add_argument("path", nargs="?", default=None)
    args = ap.parse_args(argv)

    try:
        lex = load_lexicon(args.path)
    except (OSError, LexiconError) as e:
        print(f"cannot load lexicon: {e}", file=sys.stderr)
        return 2

    problems = validate_lexicon(lex)
    print(f"{lex.source}: {len(lex.known_symptoms)} symptoms, {len(lex.synonyms)} synonyms")
    for p in problems:
        print(f"- {p}")
    return 1 if problems else 0


if __name__ == "__main__":
    sys.exit(main())
