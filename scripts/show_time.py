"""Query an NTP server once and print the UTC and local time with its reliability."""
import logging
import sys

from realtime.clock import RealTime


def main():
    logging.basicConfig(level=logging.INFO, format="%(asctime)s [%(levelname)s] %(message)s")

    if len(sys.argv) > 1:
        rt = RealTime(sys.argv[1])
    else:
        rt = RealTime.from_config()

    result = rt.query()
    local = result.in_time_zone(result.timestamp.astimezone().tzinfo)

    source = "server" if result.reliable else "local clock (unreliable)"
    print(f"Current UTC time from {rt.server} is: {result.timestamp.isoformat()} [{source}]")
    print(f"Current time in the system time zone is: {local.timestamp.isoformat()}")
    if result.failure is not None:
        print(f"Reason: {type(result.failure).__name__}: {result.failure}")
    sys.exit(0 if result.reliable else 1)


if __name__ == "__main__":
    main()
