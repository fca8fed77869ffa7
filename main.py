"""
StudyBuddy speech command line

Examples:
  python main.py serve
  python main.py providers
  python main.py config set provider=google apiKey=...
  python main.py speak "Hello there"
"""

import argparse
import asyncio
import json
import sys

from config import settings
from backend.settings_store import SettingsStore
from backend.speech_controller import ENABLED_KEY
from backend.speech_providers import SpeechError
from backend.speech_service import SpeechService
from utils.logger import logger


def _parse_assignments(pairs):
    values = {}
    for pair in pairs:
        if "=" not in pair:
            raise ValueError(f"Expected KEY=VALUE, got: {pair}")
        key, value = pair.split("=", 1)
        values[key.strip()] = value.strip() or None
    return values


def cmd_serve(args) -> int:
    import uvicorn
    uvicorn.run(
        "web_ui.api.main:app",
        host=args.host or settings.SPEECH_HOST,
        port=args.port or settings.SPEECH_PORT,
        reload=args.reload,
    )
    return 0


def cmd_providers(service: SpeechService, args) -> int:
    for descriptor in service.get_available_providers():
        status = "supported" if descriptor.is_supported else "not supported"
        print(f"{descriptor.id:<12} {descriptor.display_name:<28} {status}")
    return 0


def cmd_voices(service: SpeechService, args) -> int:
    voices = asyncio.run(service.get_voices())
    if not voices:
        print("No voices available")
        return 0
    for voice in voices:
        print(f"{voice.id:<40} {voice.name:<30} {voice.language}")
    return 0


def cmd_speak(service: SpeechService, args) -> int:
    try:
        asyncio.run(service.speak(args.text))
    except SpeechError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


def cmd_config(service: SpeechService, args) -> int:
    if args.config_action == "set":
        try:
            values = _parse_assignments(args.values)
            service.set_config(values)
        except (ValueError, SpeechError) as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1

    config = service.get_config().to_storage()
    if config.get("apiKey"):
        config["apiKey"] = "********"
    print(json.dumps(config, indent=2))
    return 0


def cmd_enabled(store: SettingsStore, enabled: bool) -> int:
    store.set(ENABLED_KEY, enabled)
    print(f"Speech {'enabled' if enabled else 'disabled'}")
    return 0


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(
        description="StudyBuddy text-to-speech",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    serve = subparsers.add_parser("serve", help="Run the speech proxy API")
    serve.add_argument("--host", default=None, help="Bind address (default: SPEECH_HOST)")
    serve.add_argument("--port", type=int, default=None, help="Port (default: SPEECH_PORT)")
    serve.add_argument("--reload", action="store_true", help="Reload on code changes")

    subparsers.add_parser("providers", help="List speech providers")
    subparsers.add_parser("voices", help="List voices of the configured provider")

    speak = subparsers.add_parser("speak", help="Speak text with the configured provider")
    speak.add_argument("text", help="Text to speak")

    config_parser = subparsers.add_parser("config", help="Show or change the speech configuration")
    config_actions = config_parser.add_subparsers(dest="config_action", required=True)
    config_actions.add_parser("show", help="Print the current configuration")
    config_set = config_actions.add_parser("set", help="Update configuration fields")
    config_set.add_argument("values", nargs="+", metavar="KEY=VALUE")

    subparsers.add_parser("enable", help="Turn speech on")
    subparsers.add_parser("disable", help="Turn speech off")

    args = parser.parse_args(argv)

    if args.command == "serve":
        return cmd_serve(args)

    store = SettingsStore()
    if args.command in ("enable", "disable"):
        return cmd_enabled(store, args.command == "enable")

    service = SpeechService(store=store)
    handlers = {
        "providers": cmd_providers,
        "voices": cmd_voices,
        "speak": cmd_speak,
        "config": cmd_config,
    }
    logger.debug(f"Running command: {args.command}")
    return handlers[args.command](service, args)


if __name__ == "__main__":
    sys.exit(main())
