from linuxcheck.collection import Counter


def test_empty_counter():
    counter = Counter()
    assert counter.keys() == []
    assert counter.elements == 0
    assert counter.unique == 0
    assert counter.lookup("missing") is None


def test_put_new_key_sets_increment():
    counter = Counter()
    assert counter.put("redis", 3) == 3
    assert counter.lookup("redis") == 3


def test_put_existing_key_accumulates():
    counter = Counter()
    counter.put("nginx", 1)
    counter.put("nginx", 1)
    assert counter.lookup("nginx") == 2
    assert counter.unique == 1
    assert counter.elements == 2


def test_keys_keep_first_insertion_order():
    counter = Counter()
    for key in ["b", "a", "b", "c", "a"]:
        counter.put(key, 1)
    assert counter.keys() == ["b", "a", "c"]
    assert list(counter) == counter.keys()


def test_elements_counts_insertions_not_increments():
    counter = Counter()
    counter.put("x", 10)
    counter.put("y", 5)
    assert counter.elements == 2
    assert sum(count for _, count in counter.items()) == 15


def test_items_and_membership():
    counter = Counter()
    counter.put("alpha", 2)
    counter.put("beta", 1)
    assert counter.items() == [("alpha", 2), ("beta", 1)]
    assert "alpha" in counter
    assert "gamma" not in counter
    assert len(counter) == counter.unique