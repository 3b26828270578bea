import argparse
import sys
from pathlib import Path

from dotenv import load_dotenv

# HABITT_SETTINGS_PATH may come from .env
load_dotenv()

from api.services.habit_document import render_document
from api.services.habit_renderer import render_block
from api.services.settings_store import SettingsStore, get_store


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Render habitt blocks to HTML.")
    parser.add_argument("input", help="a habitt block, or a .md document containing habitt blocks")
    parser.add_argument("output")
    parser.add_argument("--settings", help="settings JSON file (defaults to HABITT_SETTINGS_PATH)")
    args = parser.parse_args(argv)

    in_path = Path(args.input)
    out_path = Path(args.output)
    store = SettingsStore(args.settings) if args.settings else get_store()
    config = store.get()

    text = in_path.read_text(encoding="utf-8")
    if in_path.suffix.lower() in {".md", ".markdown"}:
        output, blocks = render_document(text, config)
        print(f"Rendered {blocks} habitt block(s)")
    else:
        _, output = render_block(text, config)
    out_path.write_text(output, encoding="utf-8")
    print(f"Wrote rendered HTML → {out_path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
