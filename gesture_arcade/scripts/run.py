"""
Start the camera pipeline, the selected game, and the status API.

Usage:
    gesture-arcade --game rps                        # webcam + model/ dir
    gesture-arcade --game passcode --passcode 4321
    CAMERA=mock MODEL_BACKEND=mock gesture-arcade    # no hardware, no model
    gesture-arcade --game binary_search --no-api     # print status lines instead

Exits with status 1 when the model or the camera can't be loaded or the camera
fails mid-run, and 2 on a bad configuration.
"""
import argparse
import sys
from dataclasses import replace
from pathlib import Path

import uvicorn

from gesture_arcade.games.catalog import GAMES
from gesture_arcade.orchestrator.errors import LoadError, OpenError
from gesture_arcade.services.api import create_app
from gesture_arcade.services.config import BACKENDS, CAMERAS, Settings
from gesture_arcade.services.runtime import Runtime

PRINT_POLL_S = 0.5


def parse_args(argv=None) -> argparse.Namespace:
    p = argparse.ArgumentParser(prog="gesture-arcade", description=__doc__.splitlines()[1])
    p.add_argument("--game", choices=sorted(GAMES))
    p.add_argument("--model-dir", type=Path)
    p.add_argument("--backend", choices=BACKENDS)
    p.add_argument("--camera", choices=CAMERAS)
    p.add_argument("--camera-index", type=int)
    p.add_argument("--tick", type=float, help="override the game's tick interval (seconds)")
    p.add_argument("--passcode")
    p.add_argument("--host")
    p.add_argument("--port", type=int)
    p.add_argument("--no-api", action="store_true", help="print status changes instead of serving HTTP")
    p.add_argument("--env-file", default=".env")
    return p.parse_args(argv)


def settings_from_args(args: argparse.Namespace) -> Settings:
    settings = Settings.from_env(args.env_file)
    overrides = {
        "game": args.game,
        "model_dir": args.model_dir,
        "model_backend": args.backend,
        "camera": args.camera,
        "camera_index": args.camera_index,
        "tick_seconds": args.tick,
        "passcode": args.passcode,
        "api_host": args.host,
        "api_port": args.port,
    }
    return replace(settings, **{k: v for k, v in overrides.items() if v is not None})


def print_status(runtime: Runtime) -> None:
    last = None
    while not runtime.cancel.wait(PRINT_POLL_S):
        text = runtime.controller.status_text if runtime.controller else None
        if text != last:
            print(text, flush=True)
            last = text
        if not runtime.running:
            print("capture stopped", file=sys.stderr)
            break


def main(argv=None) -> int:
    args = parse_args(argv)
    try:
        settings = settings_from_args(args)
    except ValueError as e:
        print(f"[ERROR] bad configuration: {e}", file=sys.stderr)
        return 2

    runtime = Runtime(settings)
    try:
        runtime.start()
    except LoadError as e:
        print(f"[ERROR] model not loaded: {e}", file=sys.stderr)
        return 1
    except OpenError as e:
        print(f"[ERROR] camera unavailable: {e}", file=sys.stderr)
        return 1
    except ValueError as e:
        print(f"[ERROR] bad configuration: {e}", file=sys.stderr)
        return 2

    try:
        if args.no_api:
            print_status(runtime)
        else:
            uvicorn.run(create_app(runtime), host=settings.api_host, port=settings.api_port)
    except KeyboardInterrupt:
        pass
    finally:
        runtime.stop()
    failure = runtime.capture_loop.failure if runtime.capture_loop else None
    if failure:
        print(f"[ERROR] camera unavailable: {failure}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
