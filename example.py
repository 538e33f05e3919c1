#!/usr/bin/env python3
"""
Example usage of the DynamoDB transcoder.

This script shows how JSON-like values and typed records are converted
to and from DynamoDB attribute values.
"""

import json
from typing import Dict, List, Optional

from pydantic import BaseModel

from dynamo_transcoder import DecodeError, DynamoTranscoder, UInt32


class Profile(BaseModel):
    age: UInt32
    city: str
    interests: List[str]


class User(BaseModel):
    pk: str
    name: str
    email: str
    profile: Profile
    settings: Dict[str, str]
    manager: Optional[str] = None


def main():
    """Main example function."""
    print("DynamoDB Transcoder Example")
    print("=" * 50)

    transcoder = DynamoTranscoder()

    # Untyped values
    sample_data = {
        "config": {
            "version": "1.0.0",
            "features": {
                "user_registration": True,
                "private_messaging": False
            },
            "limits": {
                "max_posts_per_user": 100,
                "max_post_length": 5000
            },
            "ratio": 0.75,
            "retired": None
        }
    }

    attribute = transcoder.marshall(sample_data)
    print("Marshalled value:")
    print(json.dumps(attribute, indent=2)[:600] + "...\n")

    restored = transcoder.unmarshall(attribute)
    print(f"Round trip equal: {restored == sample_data}\n")

    # Typed records
    user = User(
        pk="user#001",
        name="Alice Johnson",
        email="alice@example.com",
        profile=Profile(age=30, city="New York", interests=["reading", "hiking"]),
        settings={"theme": "dark", "privacy": "public"},
    )

    item = transcoder.marshall_item_t(user)
    print("Item ready for put_item:")
    print(json.dumps(item, indent=2)[:600] + "...")
    print(f"Estimated item size: {transcoder.item_size(item)} bytes")
    print(f"Within item limit: {transcoder.fits_item_limit(item)}\n")

    loaded = transcoder.unmarshall_item_t(item, User)
    print(f"Typed round trip equal: {loaded == user}\n")

    # Decode failures report every problem with its location
    item["profile"]["M"]["age"] = {"N": "-1"}
    del item["email"]
    try:
        transcoder.unmarshall_item_t(item, User)
    except DecodeError as e:
        print("Decode failed:")
        for error in e.errors:
            print(f"   {error.location}: {error.kind.value} ({error.message})")


if __name__ == "__main__":
    main()
