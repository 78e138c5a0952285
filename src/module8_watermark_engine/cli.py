"""
Command-line interface.
"""

import argparse
import json
import logging
import os
import sys
import time

from ..config import ConfigurationError, load_config
from ..module1_payload import PayloadFormatError, WatermarkPayload
from ..module4_frame_watermark import FrameWatermarkError
from .engine import WatermarkEngine
from .errors import CodecError, WatermarkError
from .logging_utils import setup_logging


KEY_ENV_VAR = "VIDCHAIN_WATERMARK_KEY"

EXAMPLES = """
Examples:
  vidchain-watermark embed in.mp4 out.mp4 --video-id v1 --user-id u1 --key secret
  vidchain-watermark extract out.mp4 --bits 1944 --key secret
  vidchain-watermark verify out.mp4 --video-id v1 --user-id u1 --timestamp 1700000000
"""


def _add_payload_arguments(parser: argparse.ArgumentParser, default_timestamp: bool):
    parser.add_argument('--video-id', type=str, required=True, help='Video identifier')
    parser.add_argument('--user-id', type=str, required=True, help='User identifier')
    parser.add_argument(
        '--timestamp',
        type=int,
        default=None,
        required=not default_timestamp,
        help='Seconds since epoch' + (' (default: now)' if default_timestamp else '')
    )
    parser.add_argument('--tx-hash', type=str, default=None, help='Blockchain transaction hash')
    parser.add_argument('--custom-data', type=str, default=None, help='Free-form custom data')


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='vidchain-watermark',
        description='Embed, extract and verify invisible video watermarks',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=EXAMPLES,
    )
    parser.add_argument('--config', type=str, default=None, help='YAML file merged over the defaults')
    parser.add_argument('--key', type=str, default=None, help=f'Encryption key (default: ${KEY_ENV_VAR})')
    parser.add_argument('--workers', type=int, default=None, help='Frame worker threads')
    parser.add_argument('--verbose', action='store_true', help='Enable debug logging')

    subparsers = parser.add_subparsers(dest='command', required=True)

    embed = subparsers.add_parser('embed', help='Watermark a video')
    embed.add_argument('input', type=str, help='Source video')
    embed.add_argument('output', type=str, help='Watermarked output video')
    _add_payload_arguments(embed, default_timestamp=True)
    embed.add_argument('--strength', type=float, default=None, help='Embedding strength (0, 100]')
    embed.add_argument('--frame-interval', type=int, default=None, help='Embed every Nth frame')

    extract = subparsers.add_parser('extract', help='Recover a watermark payload')
    extract.add_argument('video', type=str, help='Video to inspect')
    extract.add_argument('--bits', type=int, required=True, help='Embedded bitstream length')
    extract.add_argument('--strength', type=float, default=None, help='Strength used at embed time')

    verify = subparsers.add_parser('verify', help='Check a video against an expected payload')
    verify.add_argument('video', type=str, help='Video to inspect')
    _add_payload_arguments(verify, default_timestamp=False)
    verify.add_argument('--bits', type=int, default=None, help='Embedded bitstream length (default: inferred)')
    verify.add_argument('--strength', type=float, default=None, help='Strength used at embed time')

    return parser


def _payload_from_args(args) -> WatermarkPayload:
    return WatermarkPayload(
        video_id=args.video_id,
        user_id=args.user_id,
        timestamp=args.timestamp if args.timestamp is not None else int(time.time()),
        blockchain_tx_hash=args.tx_hash,
        custom_data=args.custom_data,
    )


def _load_config(args):
    overrides = {'system': {'workers': args.workers}} if args.workers is not None else None
    return load_config(args.config, overrides)


def run(args, config) -> dict:
    engine = WatermarkEngine(config)

    key = args.key or os.environ.get(KEY_ENV_VAR)
    if not key:
        raise WatermarkError(f"No encryption key given (use --key or ${KEY_ENV_VAR})")

    if args.command == 'embed':
        payload = _payload_from_args(args)
        result = engine.embed_watermark(
            args.input, args.output, payload, key,
            strength=args.strength, frame_interval=args.frame_interval,
        )
        output = result.to_dict()
        output['payloadBitLength'] = engine.payload_codec.encoded_bit_length(payload)
        return output

    if args.command == 'extract':
        return engine.extract_watermark(args.video, key, args.bits, strength=args.strength).to_dict()

    return engine.verify_watermark(
        args.video, _payload_from_args(args), key,
        expected_payload_bit_length=args.bits, strength=args.strength,
    ).to_dict()


def main(argv=None) -> int:
    """Main entry point for the vidchain-watermark command."""
    args = build_parser().parse_args(argv)

    try:
        config = _load_config(args)
    except (ConfigurationError, FileNotFoundError) as e:
        setup_logging(verbose=args.verbose)
        logging.error(f"Invalid configuration: {e}")
        return 1
    setup_logging(verbose=args.verbose or config.system.verbose)

    try:
        result = run(args, config)
    except (
        WatermarkError,
        CodecError,
        FrameWatermarkError,
        PayloadFormatError,
        FileNotFoundError,
    ) as e:
        logging.error(f"{args.command} failed: {e}")
        return 1

    print(json.dumps(result, indent=2, ensure_ascii=False))
    if args.command == 'verify':
        return 0 if result['verified'] else 2
    return 0


if __name__ == '__main__':
    sys.exit(main())
