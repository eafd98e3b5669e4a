"""Command-line entry point: encode an image, decode a code, or round-trip.

    percepta encode photo.png --mode compact --culture japanese
    percepta decode FLQ000000W0%ANK6X --decoding-mode dreamlike
    percepta process photo.png

Results are printed as JSON.
"""

from __future__ import annotations

import argparse
import logging
import sys

import numpy as np
from dotenv import load_dotenv
from PIL import Image

from percepta.config import SystemConfig, settings
from percepta.engine.context import RasterImage
from percepta.errors import PerceptaError
from percepta.system import PerceptualSystem

logger = logging.getLogger(__name__)


def load_image(path: str) -> RasterImage:
    with Image.open(path) as img:
        return RasterImage.from_array(np.asarray(img.convert("RGBA")))


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="percepta", description="Lossy perceptual codec")
    parser.add_argument("--culture", default=None, help='Grammar key or "a+b" hybrid')
    parser.add_argument("--blend-weight", type=float, default=None)
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--valence", type=float, default=None, help="Context emotion, 0-1")
    parser.add_argument("--arousal", type=float, default=None, help="Context emotion, 0-1")
    sub = parser.add_subparsers(dest="command", required=True)

    encode_cmd = sub.add_parser("encode", help="Encode an image into a code")
    encode_cmd.add_argument("image")
    encode_cmd.add_argument("--mode", choices=["compact", "balanced", "rich"], default=None)

    decode_cmd = sub.add_parser("decode", help="Decode a code into an experience")
    decode_cmd.add_argument("code")
    decode_cmd.add_argument("--decoding-mode", choices=["stable", "dreamlike", "npc"], default=None)

    process_cmd = sub.add_parser("process", help="Encode then decode an image")
    process_cmd.add_argument("image")
    process_cmd.add_argument("--mode", choices=["compact", "balanced", "rich"], default=None)
    process_cmd.add_argument("--decoding-mode", choices=["stable", "dreamlike", "npc"], default=None)
    return parser.parse_args(argv)


def _context(args: argparse.Namespace) -> dict | None:
    if args.valence is None or args.arousal is None:
        return None
    return {"emotion": {"valence": args.valence, "arousal": args.arousal}}


def main(argv: list[str] | None = None) -> int:
    load_dotenv()
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )
    args = _parse_args(argv)

    config = SystemConfig.from_settings(
        mode=getattr(args, "mode", None),
        culture=args.culture,
        blend_weight=args.blend_weight,
        decoding_mode=getattr(args, "decoding_mode", None),
        seed=args.seed,
    )
    system = PerceptualSystem(config)

    try:
        if args.command == "encode":
            result = system.encode(load_image(args.image), _context(args))
        elif args.command == "decode":
            result = system.decode(args.code)
        else:
            result = system.process(load_image(args.image), _context(args))
    except (PerceptaError, OSError) as e:
        logger.error("%s failed: %s", args.command, e)
        return 1

    print(result.model_dump_json(indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
