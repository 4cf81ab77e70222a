"""
Interactive terminal tester for the date resolver.

Run with:
    python cli.py --timezone Europe/London
    python cli.py --now 2024-01-15T10:00:00Z

Without --now every lookup uses the current time as the reference instant.
"""
import argparse
from typing import Optional

import config
from date_phrase import DateparserPhraseParser
from date_resolver import resolve_human_datetime
from errors import DateResolutionError
from timezone_utils import format_instant, require_zone, system_clock

_QUIT = {"quit", "exit"}


def _ask(prompt: str) -> Optional[str]:
    """Read one line; None means the user wants to stop."""
    try:
        answer = input(prompt).strip()
    except (EOFError, KeyboardInterrupt):
        print("\nGoodbye!")
        return None
    if answer.lower() in _QUIT:
        print("Goodbye!")
        return None
    return answer


def _run_cli(time_zone: str, now: Optional[str] = None) -> None:
    tz = require_zone(time_zone)
    parser = DateparserPhraseParser()

    print("Human date → ISO  (type 'quit' or 'exit' to stop)")
    print(f"Timezone: {time_zone}")
    print("-" * 60)
    while True:
        human_date = _ask("Date: ")
        if human_date is None:
            break
        if not human_date:
            continue
        human_time = _ask("Time: ")
        if human_time is None:
            break

        reference = now or format_instant(system_clock(tz))
        try:
            result = resolve_human_datetime(human_date, human_time, time_zone, reference, parser=parser)
        except DateResolutionError as exc:
            print(f"\n{exc.error}: {exc.message}\n")
            continue
        print(f"\n{result.converted_date}\n")


def main(argv=None) -> None:
    parser = argparse.ArgumentParser(description="Resolve human dates interactively.")
    parser.add_argument("--timezone", default=config.DEFAULT_TIME_ZONE, help="IANA timezone")
    parser.add_argument("--now", default=None, help="reference instant in ISO 8601")
    args = parser.parse_args(argv)

    config.configure_logging()
    try:
        _run_cli(args.timezone, args.now)
    except DateResolutionError as exc:
        parser.exit(2, f"{exc.error}: {exc.message}\n")


if __name__ == "__main__":
    main()
