#!/usr/bin/env python3
"""
Functional check of the preparation pipeline - prints the canonical text of a file.

Runs prepare() with default options on the file content:
- HTML detection, sanitization and conversion
- Heuristics (artifacts, pseudo-headings, pseudo-tables, fences, tokens)
- Tree cleanup (empty nodes, empty sections, duplicate headings)
- Canonical formatting

Usage:
    python scripts/prepare_file.py PATH [--save] [--kv]

Example:
    python scripts/prepare_file.py tests/samples/ticket.txt
    python scripts/prepare_file.py tests/samples/page.html --save
"""
import sys
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from text_prep import prepare


def prepare_file(path: Path, save: bool = False, table_mode: str = "keep") -> None:
    """Prepare one file and print or save the result."""
    print(f"\n{'=' * 60}")
    print(f"Preparing: {path}")
    print(f"{'=' * 60}\n")

    try:
        raw = path.read_text(encoding="utf-8")
        result = prepare(raw, {"tableMode": table_mode})

        print("Stats:")
        print(f"   - Input length: {len(raw)} chars")
        print(f"   - Output length: {result.stats.chars} chars")
        print(f"   - Lines: {result.stats.lines}")
        print(f"   - Approx tokens: {result.stats.approx_tokens}")
        print(f"   - Outline entries: {len(result.outline)}")

        for warning in result.warnings:
            print(f"   - Warning: {warning}")

        if save:
            output_path = path.with_suffix(".prepared.md")
            with open(output_path, "w", encoding="utf-8") as f:
                f.write(f"> Source: {path.name}\n")
                if result.outline:
                    f.write(f"> Outline: {' / '.join(result.outline)}\n")
                f.write("\n---\n\n")
                f.write(result.cleaned_text)

            print(f"\nSaved: {output_path}")
        else:
            print(f"\n{'─' * 60}")
            print("CLEANED TEXT:")
            print(f"{'─' * 60}\n")
            print(result.cleaned_text)

    except OSError as e:
        print(f"Cannot read {path}: {e}")


def main():
    args = sys.argv[1:]
    save = "--save" in args
    table_mode = "kv" if "--kv" in args else "keep"
    args = [a for a in args if a not in ("--save", "--kv")]
    if not args:
        print(__doc__)
        sys.exit(1)
    prepare_file(Path(args[0]), save=save, table_mode=table_mode)


if __name__ == "__main__":
    main()
