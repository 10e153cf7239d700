from __future__ import annotations

import argparse
import asyncio
import contextlib
import json
import logging
from typing import Any, Dict, Iterable, List, Optional

from .events import (
    Event,
    EventType,
    InMemoryThreadManager,
    wait_for_event,
    wait_for_event_count,
    wait_for_event_match,
)
from .logging_utils import get_current_log_file, setup_logging
from .registry import list_categories, validate_directory
from .waiting import ConditionTimeoutError

DEMO_THREAD_ID = "agent-thread"
DEFAULT_STEP_DELAY = 0.02


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="zenpowers",
        description="Skill registry helpers and a condition-based waiting demo.",
    )
    subparsers = parser.add_subparsers(dest="command")

    subparsers.add_parser("categories", help="List the available skill categories.")

    check_dir = subparsers.add_parser(
        "check-dir",
        help="Validate that a skills directory exists.",
    )
    check_dir.add_argument("path", help="Directory to validate.")

    demo = subparsers.add_parser(
        "demo",
        help="Wait on a simulated agent's events instead of sleeping blindly.",
    )
    demo.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Seconds to wait for each condition (defaults to ZENPOWERS_WAIT_TIMEOUT or 5).",
    )
    demo.add_argument(
        "--poll-interval",
        type=float,
        default=None,
        help="Seconds between condition checks (defaults to 0.01).",
    )
    demo.add_argument(
        "--step-delay",
        type=float,
        default=DEFAULT_STEP_DELAY,
        help="Seconds the simulated agent pauses between events.",
    )

    parser.set_defaults(
        command="demo",
        timeout=None,
        poll_interval=None,
        step_delay=DEFAULT_STEP_DELAY,
    )
    return parser


async def _simulate_agent(
    manager: InMemoryThreadManager,
    thread_id: str,
    step_delay: float,
) -> None:
    script = [
        Event(EventType.TOOL_CALL, {"tool": "read_file", "path": "README.md"}, "call_1"),
        Event(EventType.TOOL_CALL, {"tool": "run_tests", "target": "tests/"}, "call_2"),
        Event(EventType.TOOL_RESULT, {"status": "ok", "lines": 42}, "call_1"),
        Event(EventType.TOOL_RESULT, {"status": "ok", "passed": 12}, "call_2"),
        Event(EventType.AGENT_MESSAGE, {"text": "All tests pass."}, "msg_1"),
    ]
    for event in script:
        await asyncio.sleep(step_delay)
        manager.append_event(thread_id, event)


async def run_demo(
    *,
    timeout: Optional[float] = None,
    poll_interval: Optional[float] = None,
    step_delay: float = DEFAULT_STEP_DELAY,
) -> int:
    logger = logging.getLogger("zenpowers.cli")
    log_path = get_current_log_file()
    if log_path is not None:
        logger.debug("Demo run writing logs to %s", log_path)

    manager = InMemoryThreadManager()
    agent_task = asyncio.create_task(
        _simulate_agent(manager, DEMO_THREAD_ID, step_delay)
    )
    waits = {"timeout": timeout, "poll_interval": poll_interval}

    try:
        tool_calls = await wait_for_event_count(
            manager, DEMO_THREAD_ID, EventType.TOOL_CALL, 2, **waits
        )
        logger.info("Observed %d tool call(s).", len(tool_calls))

        test_result = await wait_for_event_match(
            manager,
            DEMO_THREAD_ID,
            lambda event: event.type == EventType.TOOL_RESULT and event.id == "call_2",
            "TOOL_RESULT with id=call_2",
            **waits,
        )
        logger.info("Observed tool result for %s.", test_result.id)

        tool_results = await wait_for_event_count(
            manager, DEMO_THREAD_ID, EventType.TOOL_RESULT, 2, **waits
        )
        message = await wait_for_event(
            manager, DEMO_THREAD_ID, EventType.AGENT_MESSAGE, **waits
        )
        logger.info("Agent replied with message id=%s.", message.id)
    except ConditionTimeoutError as exc:
        logger.error("Demo wait failed: %s", exc)
        print(f"Demo failed: {exc}")
        return 1
    finally:
        agent_task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await agent_task

    payload: Dict[str, Any] = {
        "threadId": DEMO_THREAD_ID,
        "toolCalls": [event.to_payload() for event in tool_calls],
        "matchedResult": test_result.to_payload(),
        "toolResults": [event.to_payload() for event in tool_results],
        "message": message.to_payload(),
    }
    print("Condition-based waiting demo completed.")
    print(json.dumps(payload, indent=2, sort_keys=True))
    return 0


def run_categories() -> int:
    names: List[str] = [category.value for category in list_categories()]
    print(json.dumps(names, indent=2))
    return 0


def run_check_dir(path: str) -> int:
    logger = logging.getLogger("zenpowers.cli")
    try:
        resolved = validate_directory(path, "path")
    except (ValueError, NotADirectoryError) as exc:
        logger.warning("Directory check failed: %s", exc)
        print(f"Invalid directory: {exc}")
        return 1
    print(f"Directory OK: {resolved}")
    return 0


def main(argv: Optional[Iterable[str]] = None) -> int:
    parser = build_parser()
    arg_list = list(argv) if argv is not None else None
    args = parser.parse_args(arg_list)

    log_path = setup_logging()
    print(f"Debug log: {log_path}")
    logging.getLogger("zenpowers.cli").debug("CLI invoked with args: %s", arg_list)

    if args.command == "categories":
        return run_categories()
    if args.command == "check-dir":
        return run_check_dir(args.path)
    if args.command == "demo":
        return asyncio.run(
            run_demo(
                timeout=args.timeout,
                poll_interval=args.poll_interval,
                step_delay=args.step_delay,
            )
        )

    parser.error("Unknown command.")
    return 2
