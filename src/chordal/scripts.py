import argparse
import logging
import pathlib
import sys

import trio

from .chords.dispatcher import CommandResolved, EpisodeResult, Pending, ResolutionFailure
from .chords.interpreter import ChordInterpreter, CommandExecutor
from .device.hwtypes import KeyEvent, RawKeyEvent
from .device.keystreams import make_keystream, pump_all
from .device.recorded_keyboard import load_hardware_recording, load_recording, replay
from .settings import Settings

logger = logging.getLogger(__name__)


def format_result(result: EpisodeResult) -> str:
    match result:
        case CommandResolved(sequence=sequence, command=command):
            return f"{sequence} runs the command {command}"
        case ResolutionFailure():
            return result.message
        case Pending(sequence=sequence):
            return f"{sequence or '(nothing)'} is incomplete"


class LoggingExecutor(CommandExecutor):
    def __init__(self):
        self.last_command = None

    async def execute(self, command: str, **context):
        logger.info("Running %s (from %s)", command, context.get("sequence"))


def configure_logging(verbose: bool):
    logging.basicConfig(level=logging.DEBUG if verbose else logging.INFO)


describe_parser = argparse.ArgumentParser(prog="chordal-describe", description="Show what a series of keys resolves to.")
describe_parser.add_argument("settings", type=pathlib.Path)
describe_parser.add_argument(
    "keys", nargs="+", type=RawKeyEvent.parse, help="single characters, or <name> for named keys such as <backspace>"
)
describe_parser.add_argument("--verbose", "-v", action="store_true")


def describe_cli(argv=sys.argv):
    args = describe_parser.parse_args(argv[1:])
    configure_logging(args.verbose)
    settings = Settings.load(args.settings)
    interpreter = ChordInterpreter.from_settings(settings, LoggingExecutor())
    result = interpreter.describe_key(args.keys)
    print(format_result(result))
    return 0 if isinstance(result, CommandResolved) else 1


replay_parser = argparse.ArgumentParser(prog="chordal-replay", description="Replay recorded keys through the interpreter.")
replay_parser.add_argument("settings", type=pathlib.Path)
replay_parser.add_argument("recording", type=pathlib.Path)
replay_parser.add_argument(
    "--hardware", action="store_true", help="the recording holds keyboard press/release events rather than raw keys"
)
replay_parser.add_argument("--verbose", "-v", action="store_true")


async def replay_recording(interpreter: ChordInterpreter, events: list[RawKeyEvent]) -> list[EpisodeResult]:
    async with trio.open_nursery() as nursery:
        event_send_channel, event_receive_channel = trio.open_memory_channel[RawKeyEvent](0)
        nursery.start_soon(replay, events, event_send_channel)
        async with pump_all(event_receive_channel, interpreter) as resultsource:
            return [result async for result in resultsource]


async def replay_hardware_recording(
    interpreter: ChordInterpreter, events: list[KeyEvent], settings: Settings
) -> list[EpisodeResult]:
    async with trio.open_nursery() as nursery:
        key_send_channel, key_receive_channel = trio.open_memory_channel[KeyEvent](0)
        nursery.start_soon(replay, events, key_send_channel)
        async with (
            make_keystream(key_receive_channel, settings) as keystream,
            pump_all(keystream, interpreter) as resultsource,
        ):
            return [result async for result in resultsource]


def replay_cli(argv=sys.argv):
    args = replay_parser.parse_args(argv[1:])
    configure_logging(args.verbose)
    settings = Settings.load(args.settings)
    interpreter = ChordInterpreter.from_settings(settings, LoggingExecutor())
    if args.hardware:
        results = trio.run(replay_hardware_recording, interpreter, load_hardware_recording(args.recording), settings)
    else:
        results = trio.run(replay_recording, interpreter, load_recording(args.recording))
    for result in results:
        print(format_result(result))
    return 0
