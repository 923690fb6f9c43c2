"""Command-line entry point: `python -m gridfinder_assistant "question"`."""

from __future__ import annotations

import sys

from .workflows.chat_pipeline import run


def main(argv: list[str] | None = None) -> int:
    args = sys.argv[1:] if argv is None else argv
    question = " ".join(args).strip()
    if not question:
        print('usage: python -m gridfinder_assistant "your question"', file=sys.stderr)
        return 2

    result = run(question)
    print(result.reply)
    return 1 if result.error else 0


if __name__ == "__main__":
    sys.exit(main())
