import argparse
import asyncio
import os
import uuid

from tqdm import tqdm

from core import NukeApp
from helpers.config_loader import get_config
from helpers.phrase import generate_phrase

parser = argparse.ArgumentParser(
    description="s3-nuke tool: generate randomized buckets full of randomized objects and versions"
)
parser.add_argument("-e", "--endpoint", help="override S3 endpoint address", default=os.environ.get("AWS_ENDPOINT"))
parser.add_argument("-n", "--num-buckets", type=int, required=True, help="number of buckets to create")
parser.add_argument("-o", "--num-objects", type=int, required=True, help="objects per bucket")
parser.add_argument("-v", "--num-versions", type=int, required=True, help="versions per object")
parser.add_argument("-r", "--region", default="us-west-2", help="region to create buckets in")
parser.add_argument("-p", "--bucket-prefix", default="s3gen", help="prefix for every bucket name")
parser.add_argument("--config", default="config.yml")
parser.add_argument("--yes", action="store_true", help="skip the confirmation prompt")


async def generate(args) -> list[str]:
    config = get_config(args.config)
    if args.endpoint:
        config["s3"]["endpoint"] = args.endpoint
    app = NukeApp(config)
    app.init()

    created = []
    async with app.s3_service_getter(args.region) as s3:
        buckets_bar = tqdm(total=args.num_buckets, desc="create buckets ", position=0)
        objects_bar = tqdm(total=args.num_objects, desc="create objects ", position=1)
        versions_bar = tqdm(total=args.num_versions, desc="create versions", position=2)

        for _ in range(args.num_buckets):
            bucket_name = f"{args.bucket_prefix}-{uuid.uuid4()}"
            await s3.create_bucket_simple(
                bucket_name, args.region, versioned=args.num_versions > 1
            )
            created.append(bucket_name)
            buckets_bar.update(1)

            objects_bar.reset()
            for _ in range(args.num_objects):
                key = str(uuid.uuid4())
                await s3.put_object_simple(bucket_name, key, generate_phrase(20).encode())
                objects_bar.update(1)

                # first version is the put above
                versions_bar.reset()
                versions_bar.update(1)
                for _ in range(1, args.num_versions):
                    await s3.put_object_simple(bucket_name, key, generate_phrase(20).encode())
                    versions_bar.update(1)

        for bar in (versions_bar, objects_bar, buckets_bar):
            bar.close()
    return created


if __name__ == "__main__":
    args = parser.parse_args()

    print("=== RANDOM BUCKET GENERATOR ===")
    print("")
    if args.endpoint:
        print("Using S3 endpoint:", args.endpoint)
        print("")

    if not args.yes:
        answer = input(
            f"Create resources [{args.num_buckets} bucket(s)]/[{args.num_objects} object(s)]/[{args.num_versions} version(s)] (y/N) "
        )
        if answer.strip().lower() != "y":
            print("Command aborted!")
            raise SystemExit(0)

    buckets = asyncio.run(generate(args))
    print("")
    for name in buckets:
        print(name)
    print("resources created!")
