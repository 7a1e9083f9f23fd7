from events_router.core import Event, Subscription, group_by_type, pair_subscriptions


def _events() -> list[Event]:
    return [
        Event(type="b", payload=1),
        Event(type="a", payload=2),
        Event(type="b", payload=3),
        Event(type="c", payload=4),
        Event(type="a", payload=5),
    ]


def test_group_by_type_is_stable_partition() -> None:
    groups = group_by_type(_events())

    assert list(groups) == ["b", "a", "c"]
    assert [e.payload for e in groups["b"]] == [1, 3]
    assert [e.payload for e in groups["a"]] == [2, 5]
    assert [e.payload for e in groups["c"]] == [4]


def test_group_by_type_is_deterministic() -> None:
    events = _events()
    assert group_by_type(events) == group_by_type(events)


def test_group_by_type_empty() -> None:
    assert group_by_type([]) == {}


def test_pair_subscriptions_fans_out_and_reports_unrouted() -> None:
    groups = group_by_type(_events())
    sub_a1 = Subscription(type="a", subscriber_kind="kinesis", destination_resource="A1")
    sub_a2 = Subscription(type="a", subscriber_kind="kinesis", destination_resource="A2")
    sub_b = Subscription(type="b", subscriber_kind="webhook", destination_resource="B")
    sub_unused = Subscription(type="z", subscriber_kind="kinesis", destination_resource="Z")

    pairs, unrouted = pair_subscriptions(groups, [sub_a1, sub_b, sub_unused, sub_a2])

    assert [(sub.destination_resource, [e.payload for e in events]) for events, sub in pairs] == [
        ("B", [1, 3]),
        ("A1", [2, 5]),
        ("A2", [2, 5]),
    ]
    assert unrouted == ["c"]


def test_pair_subscriptions_gives_each_pair_its_own_list() -> None:
    groups = group_by_type(_events())
    subs = [
        Subscription(type="a", subscriber_kind="kinesis", destination_resource="A1"),
        Subscription(type="a", subscriber_kind="kinesis", destination_resource="A2"),
    ]

    pairs, _ = pair_subscriptions(groups, subs)

    assert pairs[0][0] == pairs[1][0]
    assert pairs[0][0] is not pairs[1][0]
