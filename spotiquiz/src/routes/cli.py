# Copyright (c) 2026 The SpotiQuiz Authors
# This file is part of SpotiQuiz and is licensed for non-commercial use only.
# See the LICENSE file for details.

"""
Console front end.

`spotiquiz host` creates a room and drives playback, `spotiquiz join CODE`
joins one as a player, `spotiquiz sign-in` stores an account and token.
"""

import argparse
import asyncio
import sys
from typing import Awaitable, Callable, Optional, Sequence

from spotiquiz import __version__
from spotiquiz.src.application.controllers.room_session_controller import RoomSessionController
from spotiquiz.src.application.services.identity_resolver_application_service import IdentityResolver
from spotiquiz.src.application.services.room_entry_application_service import RoomEntryService
from spotiquiz.src.config.client_config import ClientConfig
from spotiquiz.src.domain.models.game_events import ConnectionLostEvent
from spotiquiz.src.domain.models.game_state import GameView, StateTransition
from spotiquiz.src.domain.models.question import Question
from spotiquiz.src.domain.models.scoreboard import Scoreboard, format_position, position_of, ranked_rows
from spotiquiz.src.infrastructure.channel.room_channel import RoomChannel
from spotiquiz.src.infrastructure.http.room_service_client import RoomServiceClient
from spotiquiz.src.infrastructure.playback.playback_device_factory import PlaybackDeviceFactory
from spotiquiz.src.infrastructure.storage.json_file_store import JsonFileStore
from spotiquiz.src.monitoring import get_logger, setup_logging
from spotiquiz.src.monitoring.core.exceptions import SpotiQuizError, SubmissionError

logger = get_logger(__name__)


def print_scoreboard(scoreboard: Scoreboard, title: str = "Scoreboard") -> None:
    print(f"\n{title}")
    if not scoreboard:
        print("  (no scores)")
    for position, identity, score in ranked_rows(scoreboard):
        print(f"  {format_position(position):>4}  {identity:<30} {score}")


class ConsolePresenter:
    """Prints transitions and turns numbered console input into answers."""

    def __init__(self, controller: RoomSessionController, on_start: Optional[Callable[[], Awaitable[None]]] = None):
        self._controller = controller
        self._on_start = on_start
        self._shown: Optional[Question] = None

    def on_transition(self, transition: StateTransition) -> None:
        snapshot = transition.snapshot
        if transition.view is GameView.QUESTION and snapshot.question is not self._shown:
            self._shown = snapshot.question
            print(f"\n🎵 {snapshot.question.display_name}")
            for index, option in enumerate(snapshot.question.options, start=1):
                print(f"  {index}. {option}")
            print("Your answer (number): ", end="", flush=True)
        elif transition.view is GameView.SCOREBOARD:
            print_scoreboard(snapshot.scoreboard)
            identity = self._controller.session.player_id
            print(f"  You are {format_position(position_of(snapshot.scoreboard, identity))}")
        elif transition.view is GameView.FINISHED:
            print_scoreboard(snapshot.final_scoreboard, title="🏁 Final results")
        elif snapshot.roster and transition.previous_view is GameView.IDLE and not snapshot.game_started:
            print(f"👋 Players: {', '.join(snapshot.roster)}")
        elif snapshot.game_started and transition.view is GameView.IDLE:
            print("🎮 The game has started")

    def on_connection_lost(self, event: ConnectionLostEvent) -> None:
        print(f"\n❌ Connection to the room lost: {event.reason}")

    async def answer(self, line: str) -> None:
        if self._on_start is not None and self._shown is None:
            on_start, self._on_start = self._on_start, None
            await on_start()
            return
        question = self._shown
        if question is None:
            return
        try:
            index = int(line.strip()) - 1
        except ValueError:
            print(f"Type a number between 1 and {len(question.options)}")
            return
        if not 0 <= index < len(question.options):
            print(f"Type a number between 1 and {len(question.options)}")
            return

        try:
            outcome = await self._controller.submit_answer(question.options[index], question.id)
        except SubmissionError as e:
            print(f"❌ {e}")
            return
        if outcome is not None:
            verdict = "✅ Correct" if outcome.is_correct else f"❌ Wrong, it was {question.correct}"
            print(f"{verdict} (+{outcome.points_earned}, total {outcome.total_score})")


async def _stdin_lines():
    loop = asyncio.get_running_loop()
    reader = asyncio.StreamReader()
    await loop.connect_read_pipe(lambda: asyncio.StreamReaderProtocol(reader), sys.stdin)
    while True:
        line = await reader.readline()
        if not line:
            return
        yield line.decode("utf-8", errors="replace")


async def _read_answers(presenter: ConsolePresenter) -> None:
    async for line in _stdin_lines():
        await presenter.answer(line)


async def _run_session(
    controller: RoomSessionController,
    on_start: Optional[Callable[[], Awaitable[None]]] = None,
) -> int:
    presenter = ConsolePresenter(controller, on_start=on_start)
    controller.add_listener(presenter.on_transition)
    controller.add_connection_listener(presenter.on_connection_lost)

    async with controller:
        if controller.connection_lost:
            return 1
        answers = asyncio.ensure_future(_read_answers(presenter))
        try:
            await controller.wait_until_finished()
        except SpotiQuizError as e:
            logger.error(f"❌ {e}")
            return 1
        finally:
            answers.cancel()
            await asyncio.gather(answers, return_exceptions=True)
    return 0


async def _host(config: ClientConfig, args: argparse.Namespace) -> int:
    resolver = IdentityResolver(JsonFileStore(config.state_file))
    rooms = RoomServiceClient(config.api_url, resolver.access_token, timeout=config.request_timeout)
    entry = RoomEntryService(resolver, rooms)

    async with rooms:
        if not await entry.validate_credentials():
            print("Hosting requires a signed-in account: run `spotiquiz sign-in` first")
            return 1
        session = await entry.create_room()
        print(f"🎮 Room code: {session.room_code}")

        if args.device_id:
            resolver.remember_playback_device(args.device_id)
        device_id = resolver.playback_device_id()
        device = PlaybackDeviceFactory.create_device(config, resolver.access_token, device_id=device_id)
        if device_id:
            device.mark_ready(device_id)

        channel = RoomChannel(config.ws_url, session.room_code, session.player_id, config.connect_timeout)
        controller = RoomSessionController(session, channel, rooms, device)

        async def start_game() -> None:
            options = {"mode": args.mode} if args.mode else None
            try:
                result = await entry.start_game(session, options)
            except SpotiQuizError as e:
                print(f"❌ Could not start the game: {e}")
                return
            print(f"🎮 {result.status} ({result.questions_count or '?'} questions)")

        try:
            print("Press Enter to start the game once everyone has joined")
            return await _run_session(controller, on_start=start_game)
        finally:
            await device.close()


async def _join(config: ClientConfig, args: argparse.Namespace) -> int:
    resolver = IdentityResolver(JsonFileStore(config.state_file))
    rooms = RoomServiceClient(config.api_url, resolver.access_token, timeout=config.request_timeout)
    entry = RoomEntryService(resolver, rooms)

    async with rooms:
        await entry.validate_credentials()
        session = await entry.join_room(args.code, display_name=args.name)
        print(f"✅ Joined room {session.room_code} as {session.player_id}, waiting for the host")

        channel = RoomChannel(config.ws_url, session.room_code, session.player_id, config.connect_timeout)
        return await _run_session(RoomSessionController(session, channel, rooms))


def _sign_in(config: ClientConfig, args: argparse.Namespace) -> int:
    resolver = IdentityResolver(JsonFileStore(config.state_file))
    resolver.sign_in(args.account_id, args.token)
    print(f"✅ Signed in as {args.account_id}")
    return 0


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="spotiquiz", description="SpotiQuiz room client")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--log-level",
        help="Override LOG_LEVEL for this run.",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    host = commands.add_parser("host", help="Create a room and host the game.")
    host.add_argument(
        "--device-id",
        help="Playback device id to drive; remembered for later sessions.",
    )
    host.add_argument(
        "--mode",
        help="Game mode forwarded to the room service when starting.",
    )

    join = commands.add_parser("join", help="Join a room as a player.")
    join.add_argument("code", help="Six character room code.")
    join.add_argument(
        "--name",
        help="Display name to join under (defaults to the stored identity).",
    )

    sign_in = commands.add_parser("sign-in", help="Store an account id and access token.")
    sign_in.add_argument("account_id")
    sign_in.add_argument("--token", required=True)

    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> None:
    """Console entry point."""
    args = _parse_args(argv)
    try:
        config = ClientConfig.from_env()
        setup_logging(args.log_level or config.log_level, config.log_file)
    except (SpotiQuizError, ValueError) as e:
        print(f"Invalid configuration: {e}")
        raise SystemExit(2) from e

    if args.command == "sign-in":
        raise SystemExit(_sign_in(config, args))

    runner = _host if args.command == "host" else _join
    try:
        code = asyncio.run(runner(config, args))
    except SpotiQuizError as e:
        logger.error(f"❌ {e}")
        code = 1
    except KeyboardInterrupt:
        code = 130
    raise SystemExit(code)


if __name__ == "__main__":
    main()
