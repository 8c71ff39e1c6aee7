import random

import pytest

from helpers.models import ObjectIdentifier
from workers.stack import ObjectStack
from conftest import make_identifiers


def test_push_and_len():
    stack = ObjectStack()
    for obj in make_identifiers(10):
        stack.push(obj)
    assert len(stack) == 10
    assert stack.queue[0] == ObjectIdentifier(key="key0", version="version0")


def test_reset():
    stack = ObjectStack()
    stack.push(ObjectIdentifier(key="test", version="version"))
    assert len(stack) == 1
    stack.reset()
    assert len(stack) == 0


def test_full_at_capacity():
    stack = ObjectStack()
    for obj in make_identifiers(999):
        stack.push(obj)
    assert not stack.is_full()
    stack.push(ObjectIdentifier(key="last"))
    assert stack.is_full()
    with pytest.raises(OverflowError):
        stack.push(ObjectIdentifier(key="one too many"))


def test_find_missing_all_missing():
    stack = ObjectStack()
    stack.queue = make_identifiers(1000)
    assert stack.find_missing_from([]) == make_identifiers(1000)


def test_find_missing_none_missing():
    stack = ObjectStack()
    stack.queue = make_identifiers(1000)
    assert stack.find_missing_from(make_identifiers(1000)) == []


def test_find_missing_random():
    objects = make_identifiers(1000)
    removed = sorted(random.sample(range(1000), 30))
    confirmed = [obj for i, obj in enumerate(objects) if i not in removed]
    random.shuffle(confirmed)

    stack = ObjectStack()
    stack.queue = list(objects)
    assert stack.find_missing_from(confirmed) == [objects[i] for i in removed]


def test_find_missing_compares_version_too():
    stack = ObjectStack()
    stack.queue = [
        ObjectIdentifier(key="same", version="v1"),
        ObjectIdentifier(key="same", version="v2"),
        ObjectIdentifier(key="nover"),
    ]
    missing = stack.find_missing_from(
        [ObjectIdentifier(key="same", version="v1"), ObjectIdentifier(key="nover")]
    )
    assert missing == [ObjectIdentifier(key="same", version="v2")]
