import argparse
import asyncio
from typing import Callable, List, Optional

from botocore.exceptions import BotoCoreError, ClientError

from core import NukeApp
from helpers.assets import LOGO, RELEASE_URL
from helpers.config_loader import get_config
from helpers.errors import NukeError, PipelineError
from helpers.models import Bucket
from helpers.phrase import generate_phrase, matches_phrase

VERSION = "dev"
COMMIT = "none"
DATE = "unknown"


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="s3-nuke",
        description="Quickly destroy all objects and versions in an AWS S3 bucket.",
    )
    parser.add_argument("-b", "--bucket", help="bucket to nuke (prompts if omitted)")
    parser.add_argument(
        "-c", "--concurrency", type=int, help="number of concurrent delete workers"
    )
    parser.add_argument("--config", default="config.yml", help="path to config file")
    parser.add_argument("-e", "--endpoint", help="override S3 endpoint address")
    parser.add_argument("-r", "--region", help="bucket region (looked up if omitted)")
    parser.add_argument(
        "--yes", action="store_true", help="skip the confirmation phrase"
    )
    parser.add_argument("--debug", action="store_true", help="enable debug mode")
    parser.add_argument(
        "--version", action="store_true", help="display version information"
    )
    return parser.parse_args(argv)


def filter_buckets(buckets: List[Bucket], search: str) -> List[Bucket]:
    search = search.lower().replace(" ", "")
    return [b for b in buckets if search in b.name.lower().replace(" ", "")]


def select_bucket_prompt(
    buckets: List[Bucket], input_func: Optional[Callable[[str], str]] = None
) -> Optional[str]:
    """Numbered bucket picker. Anything that isn't a number narrows the list."""
    input_func = input_func or input
    shown = buckets
    while True:
        if not shown:
            print("No matching buckets.")
            shown = buckets
        print("--- Select a bucket to nuke ---")
        for i, bucket in enumerate(shown, 1):
            created = bucket.creation_date.isoformat() if bucket.creation_date else "?"
            print(f"  {i}. {bucket.name}  (created {created})")

        answer = input_func("Bucket number or search (empty to abort): ").strip()
        if not answer:
            return None
        if answer.isdigit():
            index = int(answer) - 1
            if 0 <= index < len(shown):
                return shown[index].name
            print("Invalid selection.")
            continue
        shown = filter_buckets(buckets, answer)


def type_matching_phrase(input_func: Optional[Callable[[str], str]] = None) -> bool:
    input_func = input_func or input
    phrase = generate_phrase(4)
    print("Please enter the following phrase to continue:", phrase)
    return matches_phrase(phrase, input_func("Enter phrase: "))


async def run(args: argparse.Namespace) -> int:
    config = get_config(args.config)
    if args.endpoint:
        config["s3"]["endpoint"] = args.endpoint

    app = NukeApp(config, debug=args.debug)
    app.init()

    bucket = args.bucket
    if not bucket:
        print("fetching bucket list...")
        buckets = await app.get_all_buckets()
        if not buckets:
            print("No buckets found.")
            return 0
        bucket = select_bucket_prompt(buckets)
        if not bucket:
            print("Command aborted!")
            return 0

    region = args.region
    if not region and not app.s3_endpoint:
        region = await app.get_bucket_region(bucket)
    print(f"Bucket: {bucket}" + (f" ({region})" if region else ""))

    if not args.yes:
        print(f"!!! Every object, version and delete marker in {bucket} will be destroyed !!!")
        if not type_matching_phrase():
            print("Phrase did not match, command aborted!")
            return 1

    try:
        result = await app.nuke(bucket, args.concurrency, region)
    except PipelineError as e:
        print(f"[ERROR] {e}")
        if e.__cause__ is not None and app.debug:
            print(f"[ERROR] caused by: {e.__cause__!r}")
        print(f"Deleted {e.deleted} of {e.enumerated} listed objects before failing.")
        if e.failures:
            print(f"{len(e.failures)} objects were not confirmed deleted.")
        return 1

    print(f"Deleted {result.deleted} objects from {bucket}.")
    if result.failures:
        print(f"[WARN] {len(result.failures)} objects were not confirmed deleted:")
        for obj in result.failures:
            print(f"  - {obj.key} (version: {obj.version or 'N/A'})")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    print(LOGO)

    if args.version:
        print("Find releases at", RELEASE_URL)
        print("")
        print("version....:", VERSION)
        print("commit.....:", COMMIT)
        print("date.......:", DATE)
        return 0

    try:
        return asyncio.run(run(args))
    except NukeError as e:
        print(f"[ERROR] {e}")
        return 1
    except (BotoCoreError, ClientError) as e:
        print(f"[ERROR] S3 request failed: {e}")
        return 1
    except KeyboardInterrupt:
        print("Interrupted.")
        return 130


if __name__ == "__main__":
    raise SystemExit(main())
